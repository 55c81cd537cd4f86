"""
Wallet schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from booking_settlement.app.models.settlement_enums import WalletTransactionType


class WalletResponse(BaseModel):
    """Schema for displaying a wallet balance."""
    id: int
    user_id: str
    currency_code: str
    balance: int
    version: int
    updated_at: datetime
    
    class Config:
        from_attributes = True


class WalletTransactionResponse(BaseModel):
    id: int
    type: WalletTransactionType
    amount: int
    balance_after: int
    description: str
    booking_id: Optional[str]
    created_at: datetime
    
    class Config:
        from_attributes = True


class WalletAdjustmentRequest(BaseModel):
    """Signed manual charge: positive credits, negative debits."""
    amount: int = Field(..., description="Minor units; must not be zero")
    description: str = Field("", max_length=500)
