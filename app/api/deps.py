from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from langchain_core.embeddings import Embeddings

from app.core.auth import verify_firebase_token
from app.core.database import get_db
from app.models.base import utcnow
from app.models.user import User
from app.services.storage import BlobStore
from app.services.task_queue import TaskQueue


def normalize_email(email: str | None) -> str | None:
    """Normalize email to lowercase and strip whitespace."""
    return email.strip().lower() if email else None


def get_current_user(
    token_data: dict = Depends(verify_firebase_token),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the Firebase identity to its local user record, creating it on
    first sight.
    """
    firebase_uid = token_data["uid"]
    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()

    if not user:
        user = User(
            firebase_uid=firebase_uid,
            email=normalize_email(token_data.get("email")),
            name=token_data.get("name"),
            picture=token_data.get("picture"),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Another request created the user first
            db.rollback()
            user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
            if not user:
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail="Failed to create or retrieve user account"
                )

    user.last_seen_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_task_queue(request: Request) -> TaskQueue:
    return request.app.state.task_queue


def get_embeddings_model(request: Request) -> Optional[Embeddings]:
    return getattr(request.app.state, "embeddings_model", None)
