from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_blob_store
from app.core.database import get_db
from app.models.user import User
from app.schemas.match import MatchOut, MessageCreate, MessageOut
from app.services.match_service import MatchService
from app.services.storage import BlobStore

router = APIRouter(prefix="/matches", tags=["Matches"])


@router.get("/", response_model=List[MatchOut])
def get_matches(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Matches with the other founder's profile, most recent activity first"""
    return MatchService.get_matches(db, user, blob_store)


@router.get("/{match_id}/messages", response_model=List[MessageOut])
def get_messages(
    match_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return MatchService.get_messages(db, user, match_id)


@router.post("/{match_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    match_id: UUID,
    req: MessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return MatchService.send_message(db, user, match_id, req.content)
