from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_blob_store
from app.core.database import get_db
from app.models.user import User
from app.schemas.discovery import SwipeRequest, SwipeResult, LikedProfileOut, AgentDirectory
from app.schemas.profile import ProfileOut
from app.services.match_service import SwipeService
from app.services.storage import BlobStore

router = APIRouter(prefix="/discovery", tags=["Discovery"])


@router.get("/profiles", response_model=List[ProfileOut])
def get_discovery_profiles(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Up to 10 unswiped active profiles in random order"""
    return SwipeService.get_discovery_profiles(db, user, blob_store)


@router.post("/swipe", response_model=SwipeResult)
def swipe_profile(
    req: SwipeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return SwipeService.swipe(db, user, req.swiped_user_id, req.direction)


@router.get("/liked", response_model=List[LikedProfileOut])
def get_liked_profiles(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    return SwipeService.get_liked_profiles(db, user, blob_store)


@router.get("/agent-profiles", response_model=AgentDirectory)
def get_agent_profiles(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Directory for the co-founder search agent"""
    return SwipeService.get_agent_profiles(db, user)
