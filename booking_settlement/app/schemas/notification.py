"""
Notification outbox schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Dict, Any
from booking_settlement.app.models.notification import NotificationType


class NotificationResponse(BaseModel):
    id: int
    user_id: str
    type: NotificationType
    title: str
    message: str
    metadata_payload: Optional[Dict[str, Any]]
    is_delivered: bool
    created_at: datetime
    delivered_at: Optional[datetime]
    
    class Config:
        from_attributes = True
