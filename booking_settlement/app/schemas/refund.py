"""
Refund schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from booking_settlement.app.models.settlement_enums import RefundStatus


class RefundCreate(BaseModel):
    """Schema for submitting a refund request."""
    booking_id: str = Field(..., min_length=1, max_length=64)
    reason: Optional[str] = Field(None, max_length=2000)
    penalty_amount: Optional[int] = Field(None, ge=0, description="Overrides the refund policy when given")


class RefundActionRequest(BaseModel):
    expected_version: Optional[int] = Field(None, ge=0)


class RefundRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=2000)
    expected_version: Optional[int] = Field(None, ge=0)


class RefundResponse(BaseModel):
    """Schema for displaying a refund."""
    id: int
    booking_id: str
    user_id: str
    status: RefundStatus
    version: int
    currency_code: str
    original_amount: int
    penalty_amount: int
    refund_amount: int
    reason: Optional[str]
    requested_at: datetime
    expert_reviewer_name: Optional[str]
    expert_reviewed_at: Optional[datetime]
    financial_reviewer_name: Optional[str]
    financial_reviewed_at: Optional[datetime]
    payment_processor_name: Optional[str]
    paid_at: Optional[datetime]
    rejecter_name: Optional[str]
    rejected_at: Optional[datetime]
    rejection_reason: Optional[str]
    
    class Config:
        from_attributes = True


class RefundTransitionResponse(BaseModel):
    """Refund after a workflow action, with the customer-facing status text."""
    refund: RefundResponse
    previous_status: Optional[RefundStatus]
    description: str
    
    class Config:
        from_attributes = True
