import uuid
from typing import List
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.models.social_connection import SocialConnection
from app.models.user import User
from app.schemas.social import SocialConnectionCreate


class SocialService:
    """Per-platform social links; one connection per (user, platform)"""

    @staticmethod
    def add_connection(db: Session, user: User, data: SocialConnectionCreate) -> dict:
        connection = db.query(SocialConnection).filter(
            SocialConnection.user_id == user.id,
            SocialConnection.platform == data.platform
        ).first()

        updated = connection is not None
        if connection:
            connection.username = data.username
            connection.profile_url = data.profile_url
            connection.scraping_enabled = data.scraping_enabled
            connection.is_active = True
        else:
            connection = SocialConnection(
                user_id=user.id,
                platform=data.platform,
                username=data.username,
                profile_url=data.profile_url,
                scraping_enabled=data.scraping_enabled,
                is_active=True,
            )
            db.add(connection)

        db.commit()
        db.refresh(connection)
        return {"connection_id": connection.id, "updated": updated}

    @staticmethod
    def list_connections(db: Session, user: User) -> List[SocialConnection]:
        return db.query(SocialConnection).filter(SocialConnection.user_id == user.id).all()

    @staticmethod
    def active_connections(db: Session, user_id: uuid.UUID) -> List[SocialConnection]:
        return db.query(SocialConnection).filter(
            SocialConnection.user_id == user_id,
            SocialConnection.is_active.is_(True)
        ).all()

    @staticmethod
    def remove_connection(db: Session, user: User, connection_id: uuid.UUID) -> None:
        connection = db.query(SocialConnection).filter(SocialConnection.id == connection_id).first()
        if not connection or connection.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Connection not found or not authorized"
            )
        db.delete(connection)
        db.commit()
