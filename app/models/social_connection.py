from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, JSON, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import utcnow
import uuid
import enum


class SocialPlatform(str, enum.Enum):
    TWITTER = "twitter"
    GITHUB = "github"
    LINKEDIN = "linkedin"
    INSTAGRAM = "instagram"
    WEBSITE = "website"


class SocialConnection(Base):
    __tablename__ = "social_connections"
    __table_args__ = (
        UniqueConstraint("user_id", "platform", name="uq_social_connections_user_platform"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(SQLEnum(SocialPlatform), nullable=False)
    username = Column(String, nullable=False)
    profile_url = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    scraping_enabled = Column(Boolean, nullable=False, default=False)
    last_scraped_at = Column(DateTime(timezone=True), nullable=True)
    connection_metadata = Column("metadata", JSON, nullable=True)  # followers, bio, location, ...
    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="social_connections")
