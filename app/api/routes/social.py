from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.social import SocialConnectionCreate, SocialConnectionOut, SocialConnectionSaved
from app.services.social_service import SocialService

router = APIRouter(prefix="/social", tags=["Social"])


@router.post("/connections", response_model=SocialConnectionSaved)
def add_social_connection(
    data: SocialConnectionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Add a platform link, replacing any existing one for the same platform"""
    return SocialService.add_connection(db, user, data)


@router.get("/connections", response_model=List[SocialConnectionOut])
def list_social_connections(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return SocialService.list_connections(db, user)


@router.delete("/connections/{connection_id}")
def remove_social_connection(
    connection_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    SocialService.remove_connection(db, user, connection_id)
    return {"status": "deleted"}
