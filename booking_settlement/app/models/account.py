"""
Account database model.

Chart-of-accounts entries. Created at setup, never edited once referenced.
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.sql import func
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import AccountType


class Account(Base):
    """
    Account model.
    
    `id` is the stable account code (e.g. "1020").
    Parent accounts are display-only aggregates and never receive postings.
    """
    __tablename__ = "accounts"
    
    id = Column(String(16), primary_key=True)
    name = Column(JSON, nullable=False)  # {"en": ..., "fa": ..., "ar": ...}
    type = Column(Enum(AccountType), nullable=False, index=True)
    parent_id = Column(String(16), ForeignKey('accounts.id'), nullable=True, index=True)
    is_parent = Column(Boolean, default=False, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Account(id='{self.id}', type='{self.type.value}', parent={self.is_parent})>"
