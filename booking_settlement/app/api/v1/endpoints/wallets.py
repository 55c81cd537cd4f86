"""
Wallet API Endpoints.

Balance and history reads for customers; signed manual charges for admins.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from booking_settlement.app.db.session import get_db
from booking_settlement.app.core.dependencies import get_actor
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.domain.wallet.wallet_service import WalletService
from booking_settlement.app.schemas.wallet import (
    WalletResponse, WalletTransactionResponse, WalletAdjustmentRequest
)

router = APIRouter(prefix="/wallets", tags=["Wallets"])
admin_router = APIRouter(prefix="/admin/wallets", tags=["Admin - Wallets"])


@router.get("/{user_id}", response_model=List[WalletResponse])
async def list_wallets(
    user_id: str = Path(..., description="Wallet owner"),
    db: AsyncSession = Depends(get_db)
):
    """All of a user's wallets, one per currency."""
    return await WalletService(db).list_wallets(user_id)


@router.get("/{user_id}/{currency_code}/transactions", response_model=List[WalletTransactionResponse])
async def list_wallet_transactions(
    user_id: str = Path(..., description="Wallet owner"),
    currency_code: str = Path(..., min_length=3, max_length=8),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db)
):
    """Most recent transactions, oldest first."""
    return await WalletService(db).transactions(user_id, currency_code.upper(), limit=limit)


@admin_router.post("/{user_id}/{currency_code}/adjust", response_model=WalletTransactionResponse)
async def adjust_wallet(
    adjustment: WalletAdjustmentRequest,
    user_id: str = Path(..., description="Wallet owner"),
    currency_code: str = Path(..., min_length=3, max_length=8),
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Manual charge.
    
    Positive amounts credit the wallet, negative amounts debit it. The
    action is written to the audit log.
    """
    return await SettlementOrchestrator(db).manual_adjustment(
        user_id,
        currency_code.upper(),
        adjustment.amount,
        actor,
        description=adjustment.description,
    )
