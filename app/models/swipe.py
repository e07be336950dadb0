from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base
from app.models.base import utcnow
import uuid
import enum


class SwipeDirection(str, enum.Enum):
    LEFT = "left"  # pass
    RIGHT = "right"  # like


class Swipe(Base):
    __tablename__ = "swipes"
    # One decision per ordered (swiper, swiped) pair, enforced by the store
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_swiper_swiped"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    swiper_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    swiped_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    direction = Column(SQLEnum(SwipeDirection), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
