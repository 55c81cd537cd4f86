"""
Journal Entry database models.

Immutable double-entry accounting records. Corrections are reversing
entries, never edits.
"""

from sqlalchemy import (
    Column, Integer, BigInteger, String, ForeignKey, DateTime, Enum, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import JournalEntryKind


class JournalEntry(Base):
    """
    Journal Entry model.
    
    One balanced accounting event: sum(debit) == sum(credit) over its lines.
    A booking has at most one entry of each kind, which makes settlement
    and reversal at-most-once.
    NO updates or deletions allowed.
    """
    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint('booking_id', 'kind', name='uq_journal_entries_booking_kind'),
    )
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    kind = Column(Enum(JournalEntryKind), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    
    # Linkage (customer ledger + booking)
    user_id = Column(String(64), nullable=True, index=True)
    booking_id = Column(String(64), ForeignKey('bookings.id'), nullable=True, index=True)
    currency_code = Column(String(8), nullable=False)
    
    # Timestamps (Immutable - no updated_at)
    posted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        order_by="JournalLine.position",
        lazy="selectin",
    )
    
    @property
    def total_debit(self) -> int:
        return sum(line.debit for line in self.lines)
    
    @property
    def total_credit(self) -> int:
        return sum(line.credit for line in self.lines)
    
    def __repr__(self):
        return f"<JournalEntry(id={self.id}, kind='{self.kind.value}', booking='{self.booking_id}')>"


class JournalLine(Base):
    """
    Journal Line model.
    
    A debit line or a credit line, never both nonzero.
    """
    __tablename__ = "journal_lines"
    __table_args__ = (
        CheckConstraint('debit >= 0 AND credit >= 0', name='ck_journal_lines_non_negative'),
        CheckConstraint('debit = 0 OR credit = 0', name='ck_journal_lines_one_side'),
    )
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    entry_id = Column(Integer, ForeignKey('journal_entries.id'), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    account_id = Column(String(16), ForeignKey('accounts.id'), nullable=False, index=True)
    
    # Financials (minor units)
    debit = Column(BigInteger, default=0, nullable=False)
    credit = Column(BigInteger, default=0, nullable=False)
    
    entry = relationship("JournalEntry", back_populates="lines")
    
    def __repr__(self):
        return f"<JournalLine(account='{self.account_id}', debit={self.debit}, credit={self.credit})>"
