from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, JSON, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import utcnow
import uuid
import enum


class SourceType(str, enum.Enum):
    """Where a document's text came from"""
    MANUAL = "manual"
    PDF = "pdf"
    SOCIAL = "social"
    WEBSITE = "website"


class Document(Base):
    __tablename__ = "documents"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    source_type = Column(SQLEnum(SourceType), nullable=False, default=SourceType.MANUAL)
    source_url = Column(String, nullable=True)  # Social media or website sources
    file_id = Column(String, nullable=True)  # Blob storage key of the uploaded file
    file_type = Column(String, nullable=True)
    doc_metadata = Column("metadata", JSON, nullable=True)  # platform, author, published_at, tags

    # Available to other users' AI personas
    is_public = Column(Boolean, nullable=False, default=False)
    # Embeddings generated for every chunk
    is_processed = Column(Boolean, nullable=False, default=False)

    uploaded_at = Column(DateTime(timezone=True), default=utcnow)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="documents")
    chunks = relationship(
        "Chunk",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="Chunk.chunk_index",
    )

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)
