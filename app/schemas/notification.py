from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.notification import NotificationType


class NotificationOut(BaseModel):
    id: UUID
    type: NotificationType
    title: str
    message: str
    related_user_id: Optional[UUID] = None
    related_match_id: Optional[UUID] = None
    related_chat_id: Optional[UUID] = None
    action_url: Optional[str] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    count: int


class MarkedCount(BaseModel):
    marked: int
