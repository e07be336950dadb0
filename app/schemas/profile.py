from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class PhotoOut(BaseModel):
    id: str
    url: Optional[str] = None


class ProfileBase(BaseModel):
    name: str = Field(..., max_length=255)
    bio: str = ""
    skills: List[str] = []
    interests: List[str] = []
    looking_for: str = Field("", description="e.g. 'technical co-founder', 'business co-founder', 'designer'")
    experience: str = Field("", description="'beginner', 'intermediate' or 'expert'")
    location: Optional[str] = None


class ProfileCreate(ProfileBase):
    twitter: Optional[str] = None
    discord: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Only fields that are provided (not None) are applied"""
    name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    looking_for: Optional[str] = None
    experience: Optional[str] = None
    location: Optional[str] = None
    twitter: Optional[str] = None
    discord: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None
    is_active: Optional[bool] = None


class ProfileOut(ProfileBase):
    id: UUID
    user_id: UUID
    username: Optional[str] = None
    twitter: Optional[str] = None
    discord: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None
    photos: List[PhotoOut] = []
    is_active: bool
    is_complete: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PhotoAddRequest(BaseModel):
    storage_id: str = Field(..., min_length=1)


class UploadUrlResponse(BaseModel):
    storage_id: str
    upload_url: str


class UsernameUpdate(BaseModel):
    username: str


class UsernameAvailability(BaseModel):
    username: str
    available: bool
    reason: Optional[str] = None
