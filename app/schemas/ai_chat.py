from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.ai_chat import ChatRole


class SourceAttribution(BaseModel):
    document_id: UUID
    title: str
    relevance_score: float


class AiChatMessageOut(BaseModel):
    role: ChatRole
    content: str
    created_at: datetime
    sources: Optional[List[SourceAttribution]] = None

    class Config:
        from_attributes = True


class AiChatOut(BaseModel):
    id: UUID
    participant_id: UUID
    profile_owner_id: UUID
    last_message_at: datetime
    total_messages: int
    messages: List[AiChatMessageOut] = []

    class Config:
        from_attributes = True


class AiMessageCreate(BaseModel):
    message: str = Field(..., min_length=1)


class AiMessageAccepted(BaseModel):
    chat_id: UUID
    task_id: UUID


class AiChatAccess(BaseModel):
    can_access: bool
    reason: Optional[str] = None
    matched_at: Optional[datetime] = None


class PersonaSummary(BaseModel):
    name: str
    bio: str
    experience: str

    class Config:
        from_attributes = True


class EnhancedAiChatOut(AiChatOut):
    profile_info: Optional[PersonaSummary] = None
