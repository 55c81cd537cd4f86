"""
Wallet database models.

Per-user, per-currency balances with an append-only transaction history.
"""

from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.sql import func
from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.db.session import Base
from booking_settlement.app.models.settlement_enums import WalletTransactionType


class Wallet(Base):
    """
    Wallet model.
    
    Keyed by (user_id, currency_code). The balance is only ever changed by a
    conditional UPDATE that also bumps `version`, and always together with a
    WalletTransaction row, so balance == sum(transactions.amount).
    """
    __tablename__ = "wallets"
    __table_args__ = (
        UniqueConstraint('user_id', 'currency_code', name='uq_wallets_user_currency'),
    )
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    currency_code = Column(String(8), nullable=False)
    
    balance = Column(BigInteger, default=0, nullable=False)
    version = Column(Integer, default=0, nullable=False)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Wallet(user='{self.user_id}', currency='{self.currency_code}', balance={self.balance})>"


class WalletTransaction(Base):
    """
    Wallet Transaction model.
    
    Signed amount: negative for debits, positive for credits. Immutable.
    """
    __tablename__ = "wallet_transactions"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    wallet_id = Column(Integer, ForeignKey('wallets.id'), nullable=False, index=True)
    
    type = Column(Enum(WalletTransactionType), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    balance_after = Column(BigInteger, nullable=False)
    description = Column(String(500), nullable=False, default="")
    booking_id = Column(String(64), nullable=True, index=True)
    
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    
    def __repr__(self):
        return f"<WalletTransaction(id={self.id}, type='{self.type.value}', amount={self.amount})>"
