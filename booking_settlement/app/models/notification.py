"""
Notification Database Model.

Outbox of plain-text messages for the Telegram/WhatsApp delivery layer.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum
from sqlalchemy.sql import func
from booking_settlement.app.db.session import Base
import enum


class NotificationType(str, enum.Enum):
    REFUND_UPDATE = "REFUND_UPDATE"
    WALLET_UPDATE = "WALLET_UPDATE"


class Notification(Base):
    """
    Outbound notification.
    Written inside the same transaction as the change it describes;
    the delivery layer marks it delivered.
    """
    __tablename__ = "notifications"
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    
    # Recipient
    user_id = Column(String(64), nullable=False, index=True)
    
    # Content
    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    metadata_payload = Column(JSON, nullable=True)
    
    # State
    is_delivered = Column(Boolean, default=False, nullable=False, index=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    
    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    def __repr__(self):
        return f"<Notification(id={self.id}, user={self.user_id}, title='{self.title}')>"
