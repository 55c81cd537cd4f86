"""
Commission model schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Dict
from booking_settlement.app.models.settlement_enums import CommissionCalculationType


class CommissionModelCreate(BaseModel):
    """Schema for creating a commission model."""
    id: str = Field(..., min_length=1, max_length=32)
    name: Dict[str, str] = Field(..., description="Localized names keyed by language (en, fa, ar)")
    calculation_type: CommissionCalculationType
    charter_commission: Decimal = Field(..., ge=0)
    creator_commission: Decimal = Field(..., ge=0)
    web_service_commission: Decimal = Field(..., ge=0)


class CommissionModelResponse(BaseModel):
    id: str
    name: Dict[str, str]
    calculation_type: CommissionCalculationType
    charter_commission: Decimal
    creator_commission: Decimal
    web_service_commission: Decimal
    created_at: datetime
    
    class Config:
        from_attributes = True
