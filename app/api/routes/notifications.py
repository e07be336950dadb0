from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.notification import NotificationOut, UnreadCount, MarkedCount
from app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/", response_model=List[NotificationOut])
def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    unread_only: bool = False,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return NotificationService.list_notifications(db, user, limit=limit, unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return {"count": NotificationService.unread_count(db, user)}


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_as_read(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return NotificationService.mark_read(db, user, notification_id)


@router.post("/read-all", response_model=MarkedCount)
def mark_all_as_read(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return {"marked": NotificationService.mark_all_read(db, user)}


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    NotificationService.delete(db, user, notification_id)
    return {"status": "deleted"}
