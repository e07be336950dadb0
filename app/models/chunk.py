from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Integer, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from pgvector.sqlalchemy import Vector
from app.core.config import EMBEDDING_DIMENSIONS
from app.core.database import Base
from app.models.base import utcnow
import uuid

class Chunk(Base):
    __tablename__ = "document_chunks"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column(UUID(as_uuid=True), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    chunk_index = Column(Integer, nullable=False)
    # Character offsets into the parent document's content
    start_index = Column(Integer, nullable=True)
    end_index = Column(Integer, nullable=True)
    # Sized for EMBEDDING_MODEL. If you change models, update EMBEDDING_DIMENSIONS.
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=True)
    embedding_model = Column(String, nullable=True)
    keywords = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    document = relationship("Document", back_populates="chunks")
