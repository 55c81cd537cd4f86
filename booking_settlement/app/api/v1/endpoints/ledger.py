"""
Ledger API Endpoints (admin).

Read-only views over the chart of accounts and the journal.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import List, Optional

from booking_settlement.app.db.session import get_db
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.schemas.ledger import (
    AccountResponse, AccountBalanceResponse, JournalEntryResponse, TrialBalanceResponse
)

router = APIRouter(prefix="/admin/ledger", tags=["Admin - Ledger"])


@router.get("/accounts", response_model=List[AccountResponse])
async def list_accounts(db: AsyncSession = Depends(get_db)):
    return await Ledger(db).list_accounts()


@router.get("/accounts/{account_id}/balance", response_model=AccountBalanceResponse)
async def get_account_balance(
    account_id: str = Path(..., description="Account code, e.g. 1020"),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Debit and credit totals; parent accounts include their descendants."""
    debit, credit = await Ledger(db).balance_of(account_id, start, end)
    return AccountBalanceResponse(account_id=account_id, start=start, end=end, debit=debit, credit=credit)


@router.get("/trial-balance", response_model=TrialBalanceResponse)
async def get_trial_balance(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    trial_balance = await Ledger(db).trial_balance(start, end)
    return TrialBalanceResponse.model_validate(trial_balance)


@router.get("/users/{user_id}/entries", response_model=List[JournalEntryResponse])
async def list_user_entries(
    user_id: str = Path(..., description="Customer user ID"),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    """Customer ledger, newest first."""
    return await Ledger(db).entries_for_user(user_id, limit=limit)
