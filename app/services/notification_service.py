import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.models.base import utcnow
from app.models.notification import Notification, NotificationType
from app.models.user import User


class NotificationService:
    """Read/unread events owned by a single recipient"""

    @staticmethod
    def create(
        db: Session,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        related_user_id: Optional[uuid.UUID] = None,
        related_match_id: Optional[uuid.UUID] = None,
        related_chat_id: Optional[uuid.UUID] = None,
        action_url: Optional[str] = None,
    ) -> Notification:
        """Stage a notification in the caller's transaction; the caller commits."""
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            related_user_id=related_user_id,
            related_match_id=related_match_id,
            related_chat_id=related_chat_id,
            action_url=action_url,
            is_read=False,
        )
        db.add(notification)
        return notification

    @staticmethod
    def list_notifications(
        db: Session,
        user: User,
        limit: int = 50,
        unread_only: bool = False
    ) -> List[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user.id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc()).limit(limit).all()

    @staticmethod
    def unread_count(db: Session, user: User) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user.id,
            Notification.is_read.is_(False)
        ).count()

    @staticmethod
    def _get_owned(db: Session, user: User, notification_id: uuid.UUID) -> Notification:
        notification = db.query(Notification).filter(Notification.id == notification_id).first()
        if not notification or notification.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found or not authorized"
            )
        return notification

    @staticmethod
    def mark_read(db: Session, user: User, notification_id: uuid.UUID) -> Notification:
        notification = NotificationService._get_owned(db, user, notification_id)
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user: User) -> int:
        unread = db.query(Notification).filter(
            Notification.user_id == user.id,
            Notification.is_read.is_(False)
        ).all()

        now = utcnow()
        for notification in unread:
            notification.is_read = True
            notification.read_at = now
        db.commit()
        return len(unread)

    @staticmethod
    def delete(db: Session, user: User, notification_id: uuid.UUID) -> None:
        notification = NotificationService._get_owned(db, user, notification_id)
        db.delete(notification)
        db.commit()
