"""
Refund Policy database models.

Cancellation penalty tiers keyed by hours remaining before departure.
"""

from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import RefundPolicyType


class RefundPolicy(Base):
    __tablename__ = "refund_policies"
    
    id = Column(String(32), primary_key=True)
    name = Column(JSON, nullable=False)
    policy_type = Column(Enum(RefundPolicyType), nullable=True)
    
    rules = relationship(
        "RefundPolicyRule",
        order_by="RefundPolicyRule.hours_before_departure",
        lazy="selectin",
    )
    
    def __repr__(self):
        return f"<RefundPolicy(id='{self.id}', rules={len(self.rules)})>"


class RefundPolicyRule(Base):
    """
    A single penalty tier.
    
    Applies when the cancellation happens at most `hours_before_departure`
    hours before departure (and no tighter tier applies).
    """
    __tablename__ = "refund_policy_rules"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    policy_id = Column(String(32), ForeignKey('refund_policies.id'), nullable=False, index=True)
    hours_before_departure = Column(Integer, nullable=False)
    penalty_percentage = Column(Numeric(7, 4), nullable=False)
