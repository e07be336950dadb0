from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from app.schemas.profile import ProfileOut


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, description="Message body")


class MessageOut(BaseModel):
    id: UUID
    match_id: UUID
    sender_id: UUID
    content: str
    sent_at: datetime

    class Config:
        from_attributes = True


class MatchOut(BaseModel):
    match_id: UUID
    matched_at: datetime
    profile: ProfileOut
    latest_message: Optional[MessageOut] = None
