"""
Notification Outbox API Endpoints.

Polled by the Telegram/WhatsApp delivery layer.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from booking_settlement.app.db.session import get_db
from booking_settlement.app.core.exceptions import ResourceNotFoundError
from booking_settlement.app.services.notification_service import NotificationService
from booking_settlement.app.schemas.notification import NotificationResponse

admin_router = APIRouter(prefix="/admin/notifications", tags=["Admin - Notifications"])


@admin_router.get("/pending", response_model=List[NotificationResponse])
async def list_pending_notifications(
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    """Undelivered notifications, oldest first."""
    return await NotificationService.list_pending(db, limit=limit)


@admin_router.patch("/{notification_id}/delivered")
async def mark_notification_delivered(
    notification_id: int = Path(...),
    db: AsyncSession = Depends(get_db)
):
    success = await NotificationService.mark_delivered(db, notification_id)
    if not success:
        raise ResourceNotFoundError("Notification", notification_id)
    
    await db.commit()
    return {"status": "success"}
