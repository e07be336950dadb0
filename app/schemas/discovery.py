from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.swipe import SwipeDirection
from app.schemas.profile import ProfileOut


class SwipeRequest(BaseModel):
    swiped_user_id: UUID
    direction: SwipeDirection = Field(..., description="'left' = pass, 'right' = like")


class SwipeResult(BaseModel):
    is_match: bool
    match_id: Optional[UUID] = None


class LikedProfileOut(ProfileOut):
    is_match: bool = False
    liked_at: datetime


class AgentProfileOut(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    bio: str
    skills: List[str]
    interests: List[str]
    looking_for: str
    location: Optional[str] = None
    experience: str
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None

    class Config:
        from_attributes = True


class AgentCurrentUser(BaseModel):
    name: str
    bio: str
    skills: List[str]
    interests: List[str]
    looking_for: str
    location: Optional[str] = None
    experience: str

    class Config:
        from_attributes = True


class AgentDirectory(BaseModel):
    profiles: List[AgentProfileOut]
    current_user: Optional[AgentCurrentUser] = None
