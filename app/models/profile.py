from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import utcnow
import uuid


class Profile(Base):
    """Co-founder profile, one per user"""
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    name = Column(String(255), nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    skills = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    looking_for = Column(String(255), nullable=False, default="")  # "technical co-founder", "designer", ...
    experience = Column(String(50), nullable=False, default="")  # "beginner", "intermediate", "expert"
    location = Column(String(255), nullable=True)
    photos = Column(JSON, nullable=False, default=list)  # Ordered blob storage keys

    # Shareable profile URL slug
    username = Column(String(30), nullable=True, unique=True, index=True)

    # Social links
    twitter = Column(String, nullable=True)
    discord = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    portfolio = Column(String, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    is_complete = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="profile")
