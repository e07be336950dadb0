import re
import uuid
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from app.core.logging import get_logger
from app.models.profile import Profile
from app.models.user import User
from app.schemas.profile import ProfileCreate, ProfileUpdate
from app.services.storage import BlobStore

logger = get_logger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30

REQUIRED_FIELDS = ("name", "bio", "looking_for", "experience")

PROFILE_UPDATE_FIELDS = (
    "name", "bio", "skills", "interests", "looking_for", "experience",
    "location", "twitter", "discord", "linkedin", "portfolio", "is_active",
)


def is_profile_complete(profile: Profile) -> bool:
    return all((getattr(profile, name) or "").strip() for name in REQUIRED_FIELDS)


def apply_profile_update(profile: Profile, update: ProfileUpdate) -> list:
    """
    Copy every field that is set on ``update`` onto ``profile``.
    Fields left as None are not touched. Returns the names that changed.
    """
    changed = []
    for name in PROFILE_UPDATE_FIELDS:
        value = getattr(update, name)
        if value is None:
            continue
        setattr(profile, name, value)
        changed.append(name)
    profile.is_complete = is_profile_complete(profile)
    return changed


def profile_to_dict(profile: Profile, blob_store: BlobStore) -> Dict[str, Any]:
    """Profile columns with photo keys resolved to {id, url}"""
    data = {column.key: getattr(profile, column.key) for column in Profile.__table__.columns}
    data["photos"] = blob_store.resolve_photos(profile.photos)
    return data


def validate_username(username: str) -> Optional[str]:
    """Reason the username is invalid, or None"""
    if len(username) < USERNAME_MIN_LENGTH or len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
    if not USERNAME_PATTERN.match(username):
        return "Username can only contain lowercase letters, numbers, and hyphens"
    if username.startswith("-") or username.endswith("-"):
        return "Username cannot start or end with a hyphen"
    return None


class ProfileService:
    """Service for managing co-founder profiles"""

    @staticmethod
    def get_by_user_id(db: Session, user_id: uuid.UUID) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    @staticmethod
    def get_own(db: Session, user: User) -> Profile:
        profile = ProfileService.get_by_user_id(db, user.id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found"
            )
        return profile

    @staticmethod
    def create_profile(db: Session, user: User, data: ProfileCreate) -> Profile:
        """Create the caller's profile. A user has at most one."""
        if ProfileService.get_by_user_id(db, user.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Profile already exists"
            )

        profile = Profile(
            user_id=user.id,
            name=data.name,
            bio=data.bio,
            skills=list(data.skills),
            interests=list(data.interests),
            looking_for=data.looking_for,
            experience=data.experience,
            location=data.location,
            twitter=data.twitter,
            discord=data.discord,
            linkedin=data.linkedin,
            portfolio=data.portfolio,
            photos=[],
            is_active=True,
        )
        profile.is_complete = is_profile_complete(profile)
        db.add(profile)
        db.commit()
        db.refresh(profile)

        logger.info("Profile created", user_id=str(user.id), is_complete=profile.is_complete)
        return profile

    @staticmethod
    def update_profile(db: Session, user: User, update: ProfileUpdate) -> Profile:
        profile = ProfileService.get_own(db, user)
        apply_profile_update(profile, update)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def add_photo(db: Session, user: User, storage_id: str) -> Profile:
        """
        Append a photo. Photo upload can come before the profile form is
        submitted, so a missing profile is created as an incomplete placeholder.
        """
        profile = ProfileService.get_by_user_id(db, user.id)
        if not profile:
            logger.warning("Profile not found, creating placeholder", user_id=str(user.id))
            profile = Profile(
                user_id=user.id,
                name="",
                bio="",
                skills=[],
                interests=[],
                looking_for="",
                experience="",
                photos=[storage_id],
                is_active=True,
                is_complete=False,
            )
            db.add(profile)
        else:
            # Reassign so the JSON column is flagged dirty
            profile.photos = [*profile.photos, storage_id]

        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def remove_photo(db: Session, user: User, storage_id: str) -> Profile:
        profile = ProfileService.get_own(db, user)
        profile.photos = [photo for photo in profile.photos if photo != storage_id]
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def get_by_username(db: Session, username: str) -> Profile:
        profile = db.query(Profile).filter(
            Profile.username == username.strip().lower(),
            Profile.is_active.is_(True)
        ).first()
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Profile not found"
            )
        return profile

    @staticmethod
    def is_username_taken(db: Session, username: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
        query = db.query(Profile).filter(Profile.username == username)
        if exclude_user_id is not None:
            query = query.filter(Profile.user_id != exclude_user_id)
        return query.first() is not None

    @staticmethod
    def check_username_availability(db: Session, user: User, username: str) -> Dict[str, Any]:
        username = username.strip().lower()
        reason = validate_username(username)
        if reason is None and ProfileService.is_username_taken(db, username, exclude_user_id=user.id):
            reason = "Username is already taken"
        return {"username": username, "available": reason is None, "reason": reason}

    @staticmethod
    def update_username(db: Session, user: User, username: str) -> Profile:
        profile = ProfileService.get_own(db, user)
        username = username.strip().lower()

        reason = validate_username(username)
        if reason:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=reason)
        if ProfileService.is_username_taken(db, username, exclude_user_id=user.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username is already taken"
            )

        profile.username = username
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username is already taken"
            )
        db.refresh(profile)
        return profile

    @staticmethod
    def generate_unique_username(db: Session, user: User) -> str:
        """Slug of the profile name, with a numeric suffix until it is free"""
        profile = ProfileService.get_own(db, user)
        base = re.sub(r"[^a-z0-9]+", "-", (profile.name or "").lower()).strip("-")
        base = base[:USERNAME_MAX_LENGTH - 4].strip("-")
        if len(base) < USERNAME_MIN_LENGTH:
            base = "founder"

        candidate = base
        suffix = 2
        while ProfileService.is_username_taken(db, candidate, exclude_user_id=user.id):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate
