"""
Refund API Endpoints.

Customer submission plus the admin review and payment actions.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from booking_settlement.app.db.session import get_db
from booking_settlement.app.core.dependencies import get_actor
from booking_settlement.app.domain.refunds.refund_workflow import RefundWorkflow
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.models.settlement_enums import RefundStatus
from booking_settlement.app.schemas.refund import (
    RefundCreate, RefundActionRequest, RefundRejectRequest, RefundResponse, RefundTransitionResponse
)

router = APIRouter(prefix="/refunds", tags=["Refunds"])
admin_router = APIRouter(prefix="/admin/refunds", tags=["Admin - Refunds"])


def _expected_version(request) -> Optional[int]:
    return request.expected_version if request is not None else None


@router.post("", response_model=RefundTransitionResponse, status_code=201)
async def submit_refund(
    request: RefundCreate,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """Request a refund for a settled booking."""
    result = await RefundWorkflow(db).submit(
        request.booking_id,
        requested_by=actor,
        reason=request.reason,
        penalty_amount=request.penalty_amount,
    )
    return RefundTransitionResponse.model_validate(result)


@router.get("/{refund_id}", response_model=RefundResponse)
async def get_refund(
    refund_id: int = Path(..., description="Refund ID"),
    db: AsyncSession = Depends(get_db)
):
    return await RefundWorkflow(db).get(refund_id)


# --- Admin ---

@admin_router.get("", response_model=List[RefundResponse])
async def list_refunds(
    status: Optional[RefundStatus] = Query(None),
    user_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    """List refunds, newest first, optionally by status or customer."""
    return await RefundWorkflow(db).list_refunds(status=status, user_id=user_id, limit=limit)


@admin_router.post("/{refund_id}/expert-approve", response_model=RefundTransitionResponse)
async def expert_approve_refund(
    refund_id: int = Path(..., description="Refund ID"),
    request: Optional[RefundActionRequest] = None,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await RefundWorkflow(db).expert_approve(
        refund_id, actor, expected_version=_expected_version(request)
    )
    return RefundTransitionResponse.model_validate(result)


@admin_router.post("/{refund_id}/financial-approve", response_model=RefundTransitionResponse)
async def financial_approve_refund(
    refund_id: int = Path(..., description="Refund ID"),
    request: Optional[RefundActionRequest] = None,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await RefundWorkflow(db).financial_approve(
        refund_id, actor, expected_version=_expected_version(request)
    )
    return RefundTransitionResponse.model_validate(result)


@admin_router.post("/{refund_id}/process-payment", response_model=RefundTransitionResponse)
async def process_refund_payment(
    refund_id: int = Path(..., description="Refund ID"),
    request: Optional[RefundActionRequest] = None,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Pay an approved refund.
    
    Credits the customer's wallet, reverses the booking entry and marks
    the booking REFUNDED, all or nothing.
    """
    result = await SettlementOrchestrator(db).complete_refund(
        refund_id, actor, expected_version=_expected_version(request)
    )
    return RefundTransitionResponse.model_validate(result)


@admin_router.post("/{refund_id}/reject", response_model=RefundTransitionResponse)
async def reject_refund(
    request: RefundRejectRequest,
    refund_id: int = Path(..., description="Refund ID"),
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await RefundWorkflow(db).reject(
        refund_id, actor, request.reason, expected_version=_expected_version(request)
    )
    return RefundTransitionResponse.model_validate(result)
