from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.models.social_connection import SocialPlatform


class SocialConnectionCreate(BaseModel):
    platform: SocialPlatform
    username: str = Field(..., min_length=1)
    profile_url: str = Field(..., min_length=1)
    scraping_enabled: bool = False


class SocialConnectionOut(BaseModel):
    id: UUID
    platform: SocialPlatform
    username: str
    profile_url: str
    is_active: bool
    scraping_enabled: bool
    last_scraped_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SocialConnectionSaved(BaseModel):
    connection_id: UUID
    updated: bool
