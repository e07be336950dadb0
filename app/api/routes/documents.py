from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from langchain_core.embeddings import Embeddings

from app.api.deps import get_current_user, get_blob_store, get_embeddings_model
from app.core.database import get_db
from app.models.user import User
from app.schemas.document import (
    DocumentCreate,
    DocumentUpdate,
    DocumentOut,
    ChunkSearchResult,
    SemanticSearchRequest,
    HybridSearchRequest,
    EmbeddingResult,
)
from app.schemas.profile import UploadUrlResponse
from app.services.document_service import DocumentService
from app.services.retrieval import keyword_search, hybrid_search
from app.services.storage import BlobStore
from app.services.vectorstore import semantic_search

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("/", response_model=List[DocumentOut])
def list_documents(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return DocumentService.list_documents(db, user)


@router.get("/public/{user_id}", response_model=List[DocumentOut])
def list_public_documents(
    user_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return DocumentService.list_public_documents(db, user_id)


@router.post("/", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
def upload_document(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Store a document and split it into retrieval chunks"""
    return DocumentService.upload_document(db, user, data)


@router.patch("/{document_id}", response_model=DocumentOut)
def update_document(
    document_id: UUID,
    update: DocumentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return DocumentService.update_document(db, user, document_id, update)


@router.delete("/{document_id}")
def delete_document(
    document_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    DocumentService.delete_document(db, user, document_id)
    return {"status": "deleted"}


@router.post("/upload-url", response_model=UploadUrlResponse)
def generate_upload_url(
    user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    return blob_store.generate_upload_url(prefix=f"documents/{user.id}")


@router.post("/{document_id}/embeddings", response_model=EmbeddingResult)
def process_embeddings(
    document_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    embeddings_model: Optional[Embeddings] = Depends(get_embeddings_model)
):
    return DocumentService.process_embeddings(db, user, document_id, embeddings_model)


@router.get("/search/keyword", response_model=List[ChunkSearchResult])
def search_keyword(
    q: str = Query(..., min_length=1),
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return keyword_search(db, q, user.id, limit=limit)


@router.post("/search/semantic", response_model=List[ChunkSearchResult])
def search_semantic(
    req: SemanticSearchRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    embeddings_model: Optional[Embeddings] = Depends(get_embeddings_model)
):
    return semantic_search(
        db,
        embeddings_model,
        req.query,
        user.id,
        limit=req.limit,
        threshold=req.threshold,
        source_types=req.source_types,
    )


@router.post("/search/hybrid", response_model=List[ChunkSearchResult])
def search_hybrid(
    req: HybridSearchRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    embeddings_model: Optional[Embeddings] = Depends(get_embeddings_model)
):
    return hybrid_search(
        db,
        embeddings_model,
        req.query,
        user.id,
        limit=req.limit,
        vector_weight=req.vector_weight,
        keyword_weight=req.keyword_weight,
    )
