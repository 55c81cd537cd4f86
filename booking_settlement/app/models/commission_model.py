"""
Commission Model database model.

Reference data describing how a booking's base price is split between the
charter provider, the flight creator and the web service.
"""

from sqlalchemy import Column, String, Numeric, DateTime, Enum, JSON
from sqlalchemy.sql import func
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import CommissionCalculationType


class CommissionModel(Base):
    """
    Commission Model.
    
    Percentage models hold percents of the base price total;
    FixedAmount models hold minor-unit amounts per passenger.
    Never mutated once created.
    """
    __tablename__ = "commission_models"
    
    id = Column(String(32), primary_key=True)
    name = Column(JSON, nullable=False)
    calculation_type = Column(Enum(CommissionCalculationType), nullable=False)
    
    charter_commission = Column(Numeric(18, 4), nullable=False, default=0)
    creator_commission = Column(Numeric(18, 4), nullable=False, default=0)
    web_service_commission = Column(Numeric(18, 4), nullable=False, default=0)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<CommissionModel(id='{self.id}', type='{self.calculation_type.value}')>"
