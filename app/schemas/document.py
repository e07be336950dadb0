from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from app.models.document import SourceType


class DocumentMetadata(BaseModel):
    platform: Optional[str] = None  # "twitter", "github", "linkedin", ...
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    tags: Optional[List[str]] = None


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str
    file_id: Optional[str] = None
    file_type: Optional[str] = None
    is_public: bool = False


class DocumentUpdate(BaseModel):
    """Only fields that are provided (not None) are applied"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    is_public: Optional[bool] = None


class DocumentOut(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    content: str
    source_type: SourceType
    source_url: Optional[str] = None
    file_id: Optional[str] = None
    file_type: Optional[str] = None
    metadata: Optional[DocumentMetadata] = Field(None, validation_alias="doc_metadata")
    is_public: bool
    is_processed: bool
    uploaded_at: datetime
    processed_at: Optional[datetime] = None
    chunk_count: int = 0

    class Config:
        from_attributes = True


class ChunkDocumentInfo(BaseModel):
    id: UUID
    title: str
    source_type: SourceType
    source_url: Optional[str] = None
    metadata: Optional[DocumentMetadata] = None


class ChunkSearchResult(BaseModel):
    chunk_id: UUID
    content: str
    chunk_index: int
    score: float
    document: ChunkDocumentInfo


class SemanticSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(5, ge=1, le=50)
    threshold: float = Field(0.3, ge=-1.0, le=1.0)
    source_types: Optional[List[SourceType]] = None


class HybridSearchRequest(BaseModel):
    query: str = Field(..., min_length=1)
    limit: int = Field(5, ge=1, le=50)
    vector_weight: float = Field(0.7, ge=0.0)
    keyword_weight: float = Field(0.3, ge=0.0)


class EmbeddingResult(BaseModel):
    success: bool
    document_id: UUID
    chunks_processed: int
    message: str
