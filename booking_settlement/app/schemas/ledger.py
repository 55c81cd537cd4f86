"""
Ledger schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Dict
from booking_settlement.app.models.settlement_enums import AccountType, JournalEntryKind


class AccountResponse(BaseModel):
    id: str
    name: Dict[str, str]
    type: AccountType
    parent_id: Optional[str]
    is_parent: bool
    
    class Config:
        from_attributes = True


class AccountBalanceResponse(BaseModel):
    account_id: str
    start: Optional[datetime]
    end: Optional[datetime]
    debit: int
    credit: int


class JournalLineResponse(BaseModel):
    account_id: str
    debit: int
    credit: int
    
    class Config:
        from_attributes = True


class JournalEntryResponse(BaseModel):
    """Schema for displaying a journal entry with its lines."""
    id: int
    kind: JournalEntryKind
    description: str
    user_id: Optional[str]
    booking_id: Optional[str]
    currency_code: str
    posted_at: datetime
    lines: List[JournalLineResponse]
    
    class Config:
        from_attributes = True


class TrialBalanceRowResponse(BaseModel):
    account_id: str
    account_type: AccountType
    debit: int
    credit: int
    
    class Config:
        from_attributes = True


class TrialBalanceResponse(BaseModel):
    rows: List[TrialBalanceRowResponse]
    total_debit: int
    total_credit: int
    is_balanced: bool
    
    class Config:
        from_attributes = True
