import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from langchain_core.embeddings import Embeddings

from app.core.logging import get_logger
from app.models.chunk import Chunk
from app.models.document import Document, SourceType
from app.models.user import User
from app.schemas.document import DocumentCreate, DocumentUpdate
from app.services.chunking import chunk_document
from app.services.vectorstore import process_document_embeddings

logger = get_logger(__name__)


def apply_document_update(document: Document, update: DocumentUpdate) -> bool:
    """
    Copy the provided fields onto ``document``.
    Returns True when the content changed and the chunks must be rebuilt.
    """
    if update.title is not None:
        document.title = update.title
    if update.is_public is not None:
        document.is_public = update.is_public
    if update.content is not None:
        document.content = update.content
        return True
    return False


def rebuild_chunks(db: Session, document: Document) -> int:
    """
    Replace every chunk of ``document`` with a fresh chunking of its content.
    Chunks are never patched in place.
    """
    db.query(Chunk).filter(Chunk.document_id == document.id).delete(synchronize_session=False)
    db.expire(document, ["chunks"])

    pieces = chunk_document(document.content)
    db.add_all([
        Chunk(
            document_id=document.id,
            user_id=document.user_id,
            content=piece["text"],
            chunk_index=piece["chunk_index"],
            start_index=piece["start"],
            end_index=piece["end"],
        )
        for piece in pieces
    ])

    # New chunks have no embeddings yet
    document.is_processed = False
    document.processed_at = None
    return len(pieces)


class DocumentService:
    """Service for user documents and their retrieval chunks"""

    @staticmethod
    def list_documents(db: Session, user: User) -> List[Document]:
        return (
            db.query(Document)
            .filter(Document.user_id == user.id)
            .order_by(Document.uploaded_at.desc())
            .all()
        )

    @staticmethod
    def list_public_documents(db: Session, owner_id: uuid.UUID) -> List[Document]:
        return (
            db.query(Document)
            .filter(Document.user_id == owner_id, Document.is_public.is_(True))
            .order_by(Document.uploaded_at.desc())
            .all()
        )

    @staticmethod
    def get_owned(db: Session, user: User, document_id: uuid.UUID) -> Document:
        document = db.query(Document).filter(Document.id == document_id).first()
        if not document or document.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Document not found or not authorized"
            )
        return document

    @staticmethod
    def upload_document(db: Session, user: User, data: DocumentCreate) -> Document:
        document = Document(
            user_id=user.id,
            title=data.title,
            content=data.content,
            source_type=SourceType.MANUAL,
            file_id=data.file_id,
            file_type=data.file_type,
            is_public=data.is_public,
            is_processed=False,
        )
        db.add(document)
        db.flush()  # flush to get document.id

        chunk_count = rebuild_chunks(db, document)
        db.commit()
        db.refresh(document)

        logger.info("Document uploaded", document_id=str(document.id), chunks=chunk_count)
        return document

    @staticmethod
    def update_document(db: Session, user: User, document_id: uuid.UUID, update: DocumentUpdate) -> Document:
        document = DocumentService.get_owned(db, user, document_id)

        if apply_document_update(document, update):
            chunk_count = rebuild_chunks(db, document)
            logger.info("Document chunks rebuilt", document_id=str(document.id), chunks=chunk_count)

        db.commit()
        db.refresh(document)
        return document

    @staticmethod
    def delete_document(db: Session, user: User, document_id: uuid.UUID) -> None:
        """Delete a document and, through the cascade, all of its chunks"""
        document = DocumentService.get_owned(db, user, document_id)
        db.delete(document)
        db.commit()

    @staticmethod
    def process_embeddings(
        db: Session,
        user: User,
        document_id: uuid.UUID,
        embeddings_model: Optional[Embeddings]
    ) -> dict:
        document = DocumentService.get_owned(db, user, document_id)

        if embeddings_model is None:
            return {
                "success": False,
                "document_id": document.id,
                "chunks_processed": 0,
                "message": "Embeddings are not enabled",
            }

        processed = process_document_embeddings(db, document, embeddings_model)
        return {
            "success": True,
            "document_id": document.id,
            "chunks_processed": processed,
            "message": f"Embedded {processed} chunks",
        }
