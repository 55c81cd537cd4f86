"""
Refund database model.

The single mutable record driving the refund approval workflow.
"""

from sqlalchemy import Column, Integer, BigInteger, String, Text, ForeignKey, DateTime, Enum
from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import RefundStatus


class Refund(Base):
    """
    Refund model.
    
    Follows a strict approval workflow:
    PENDING_EXPERT_REVIEW -> PENDING_FINANCIAL_REVIEW -> PENDING_PAYMENT -> COMPLETED,
    or REJECTED from any non-terminal state.
    Amounts are frozen at submission. Status changes are compare-and-set
    updates that bump `version`; rows are never deleted.
    """
    __tablename__ = "refunds"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    booking_id = Column(String(64), ForeignKey('bookings.id'), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    
    # Status
    status = Column(Enum(RefundStatus), default=RefundStatus.PENDING_EXPERT_REVIEW, nullable=False, index=True)
    version = Column(Integer, default=0, nullable=False)
    
    # Financials (frozen at submission)
    currency_code = Column(String(8), nullable=False)
    original_amount = Column(BigInteger, nullable=False)
    penalty_amount = Column(BigInteger, nullable=False)
    refund_amount = Column(BigInteger, nullable=False)
    reason = Column(Text, nullable=True)
    
    requested_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    
    # Expert review
    expert_reviewer_name = Column(String(100), nullable=True)
    expert_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    
    # Financial review
    financial_reviewer_name = Column(String(100), nullable=True)
    financial_reviewed_at = Column(DateTime(timezone=True), nullable=True)
    
    # Payment
    payment_processor_name = Column(String(100), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    
    # Rejection
    rejecter_name = Column(String(100), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    
    def __repr__(self):
        return f"<Refund(id={self.id}, status='{self.status.value}', amount={self.refund_amount})>"
