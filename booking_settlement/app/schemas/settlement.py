"""
Settlement schemas.
"""

from pydantic import BaseModel
from typing import Optional
from booking_settlement.app.schemas.ledger import JournalEntryResponse
from booking_settlement.app.schemas.wallet import WalletTransactionResponse


class CommissionSplitResponse(BaseModel):
    base_price_total: int
    charter: int
    creator: int
    web_service: int
    net_revenue: int
    
    class Config:
        from_attributes = True


class SettlementResponse(BaseModel):
    """Result of settling a booking."""
    booking_id: str
    journal_entry: JournalEntryResponse
    payment: WalletTransactionResponse
    split: CommissionSplitResponse
    creator_payout: Optional[WalletTransactionResponse]
    
    class Config:
        from_attributes = True
