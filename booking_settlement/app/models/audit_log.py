"""
Audit Log Database Model.

Tracks admin actions against wallets, bookings and refunds.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from booking_settlement.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking settlement and admin actions.
    
    Events logged:
    - BOOKING_SETTLED / COMMISSION_PAID
    - REFUND_SUBMITTED / REFUND_EXPERT_APPROVED / REFUND_FINANCIAL_APPROVED
    - REFUND_PAID / REFUND_REJECTED
    - WALLET_MANUAL_CHARGE
    - COMMISSION_MODEL_CREATED
    """
    __tablename__ = "audit_logs"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Who performed the action ("system" for automatic actions)
    actor_name = Column(String(100), nullable=False)
    
    # What action was performed
    action = Column(String(100), nullable=False, index=True)
    
    # Whose money or record was affected
    target_user_id = Column(String(64), index=True, nullable=True)
    
    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)
    
    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    
    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_name}, target={self.target_user_id})>"
