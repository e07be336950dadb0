from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_blob_store
from app.core.database import get_db
from app.models.user import User
from app.schemas.profile import (
    ProfileCreate,
    ProfileUpdate,
    ProfileOut,
    PhotoAddRequest,
    UploadUrlResponse,
    UsernameUpdate,
    UsernameAvailability,
)
from app.services.profile_service import ProfileService, profile_to_dict
from app.services.storage import BlobStore

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/me", response_model=ProfileOut | None)
def get_current_user_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """The caller's profile with photo URLs, or null before setup"""
    profile = ProfileService.get_by_user_id(db, user.id)
    if not profile:
        return None
    return profile_to_dict(profile, blob_store)


@router.post("/", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(
    data: ProfileCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    profile = ProfileService.create_profile(db, user, data)
    return profile_to_dict(profile, blob_store)


@router.patch("/me", response_model=ProfileOut)
def update_profile(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    profile = ProfileService.update_profile(db, user, update)
    return profile_to_dict(profile, blob_store)


@router.post("/me/photos", response_model=ProfileOut)
def add_photo(
    req: PhotoAddRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    profile = ProfileService.add_photo(db, user, req.storage_id)
    return profile_to_dict(profile, blob_store)


@router.delete("/me/photos/{storage_id:path}", response_model=ProfileOut)
def remove_photo(
    storage_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    profile = ProfileService.remove_photo(db, user, storage_id)
    return profile_to_dict(profile, blob_store)


@router.post("/upload-url", response_model=UploadUrlResponse)
def generate_upload_url(
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    return blob_store.generate_upload_url(prefix=f"photos/{user.id}")


@router.get("/username/check", response_model=UsernameAvailability)
def check_username_availability(
    username: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return ProfileService.check_username_availability(db, user, username)


@router.post("/username/generate", response_model=UsernameAvailability)
def generate_unique_username(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    username = ProfileService.generate_unique_username(db, user)
    return {"username": username, "available": True}


@router.put("/me/username", response_model=ProfileOut)
def update_username(
    req: UsernameUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    profile = ProfileService.update_username(db, user, req.username)
    return profile_to_dict(profile, blob_store)


@router.get("/u/{username}", response_model=ProfileOut)
def get_profile_by_username(
    username: str,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Public, shareable profile page. No authentication required."""
    profile = ProfileService.get_by_username(db, username)
    return profile_to_dict(profile, blob_store)
