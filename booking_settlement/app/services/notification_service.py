"""
Notification Service.

Writes plain-text messages to the notification outbox. Delivery over
Telegram/WhatsApp happens elsewhere and reports back via `mark_delivered`.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import Optional, Dict, Any, List

from booking_settlement.app.core.clock import utcnow
from booking_settlement.app.models.notification import Notification, NotificationType


class NotificationService:
    
    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.REFUND_UPDATE,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush() # Caller commits
        return notif

    @staticmethod
    async def list_pending(db: AsyncSession, limit: int = 100) -> List[Notification]:
        """Undelivered notifications, oldest first."""
        result = await db.execute(
            select(Notification)
            .where(Notification.is_delivered == False)
            .order_by(Notification.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    async def mark_delivered(db: AsyncSession, notification_id: int) -> bool:
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.is_delivered == False
        ).values(
            is_delivered=True,
            delivered_at=utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount > 0
