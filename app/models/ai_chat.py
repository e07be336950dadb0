from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, JSON, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import utcnow
import uuid
import enum


class ChatRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class AiChat(Base):
    """Conversation between a participant and another user's AI persona"""
    __tablename__ = "ai_chats"
    __table_args__ = (
        UniqueConstraint("participant_id", "profile_owner_id", name="uq_ai_chats_pair"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    participant_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    profile_owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    last_message_at = Column(DateTime(timezone=True), default=utcnow)
    total_messages = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    messages = relationship(
        "AiChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="AiChatMessage.position",
    )


class AiChatMessage(Base):
    __tablename__ = "ai_chat_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    chat_id = Column(UUID(as_uuid=True), ForeignKey("ai_chats.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # Append order within the chat
    role = Column(SQLEnum(ChatRole), nullable=False)
    content = Column(Text, nullable=False)
    # [{"document_id", "title", "relevance_score"}], assistant messages only
    sources = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    chat = relationship("AiChat", back_populates="messages")
