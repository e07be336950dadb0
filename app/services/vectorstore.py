import math
import re
from collections import Counter
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session
from langchain_core.embeddings import Embeddings

from app.core.config import EMBEDDING_MODEL
from app.core.logging import get_logger
from app.models.base import utcnow
from app.models.chunk import Chunk
from app.models.document import Document, SourceType

logger = get_logger(__name__)

STOPWORDS = frozenset("""
a about above after again against all also am an and any are as at be because been before being
below between both but by can could did do does doing down during each few for from further had
has have having he her here hers herself him himself his how i if in into is it its itself just
me more most my myself no nor not now of off on once only or other our ours ourselves out over
own same she should so some such than that the their theirs them themselves then there these
they this those through to too under until up very was we were what when where which while who
whom why will with would you your yours yourself yourselves
""".split())


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """
    Dot product over the product of L2 norms.
    Returns 0 when either vector has zero magnitude.
    """
    if len(vector_a) != len(vector_b):
        raise ValueError("Vectors must have the same length")

    dot_product = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for a, b in zip(vector_a, vector_b):
        dot_product += a * b
        norm_a += a * a
        norm_b += b * b

    norm_a = math.sqrt(norm_a)
    norm_b = math.sqrt(norm_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(dot_product / (norm_a * norm_b))


def extract_keywords(text: str, limit: int = 10) -> List[str]:
    """Most frequent non-stopword terms, lowercased"""
    words = re.findall(r"[a-z0-9][a-z0-9+#.-]*[a-z0-9+#]|[a-z0-9]", text.lower())
    counts = Counter(word for word in words if len(word) > 2 and word not in STOPWORDS)
    return [word for word, _ in counts.most_common(limit)]


def process_document_embeddings(db: Session, document: Document, embeddings_model: Embeddings) -> int:
    """
    Embed every chunk of a document and extract its keywords, then mark the
    document processed. Returns the number of chunks embedded.
    """
    chunks = (
        db.query(Chunk)
        .filter(Chunk.document_id == document.id)
        .order_by(Chunk.chunk_index)
        .all()
    )

    if chunks:
        # Batch compute embeddings for efficiency
        vectors = embeddings_model.embed_documents([c.content for c in chunks])
        for chunk, vector in zip(chunks, vectors):
            chunk.embedding = vector
            chunk.embedding_model = EMBEDDING_MODEL
            chunk.keywords = extract_keywords(chunk.content)

    document.is_processed = True
    document.processed_at = utcnow()
    db.commit()

    logger.info("Document embeddings processed", document_id=str(document.id), chunks=len(chunks))
    return len(chunks)


def semantic_query(
    db: Session,
    query_vector: Sequence[float],
    owner_id: UUID,
    limit: int = 5,
    threshold: float = 0.3,
    source_types: Optional[List[SourceType]] = None,
    public_only: bool = False,
):
    """
    Owner's embedded chunks ranked by pgvector cosine distance, with the
    similarity (1 - distance) as a third column.
    """
    distance = Chunk.embedding.cosine_distance(query_vector)
    similarity = (1 - distance).label("similarity")

    chunk_query = (
        db.query(Chunk, Document, similarity)
        .join(Document, Chunk.document_id == Document.id)
        .filter(
            Chunk.user_id == owner_id,
            Chunk.embedding.isnot(None),
            (1 - distance) >= threshold,
        )
    )
    if source_types:
        chunk_query = chunk_query.filter(Document.source_type.in_(source_types))
    if public_only:
        chunk_query = chunk_query.filter(Document.is_public.is_(True))

    return chunk_query.order_by(distance).limit(limit)


def semantic_search(
    db: Session,
    embeddings_model: Optional[Embeddings],
    query: str,
    owner_id: UUID,
    limit: int = 5,
    threshold: float = 0.3,
    source_types: Optional[List[SourceType]] = None,
    public_only: bool = False,
) -> List[dict]:
    """
    Rank the owner's embedded chunks by cosine similarity to the query.
    Without an embeddings model there is no vector path and nothing is returned.
    """
    if embeddings_model is None or not query.strip():
        return []

    query_vector = embeddings_model.embed_query(query)
    rows = semantic_query(
        db, query_vector, owner_id,
        limit=limit, threshold=threshold,
        source_types=source_types, public_only=public_only,
    ).all()

    return [
        {
            "chunk_id": chunk.id,
            "content": chunk.content,
            "chunk_index": chunk.chunk_index,
            "score": float(similarity),
            "document": {
                "id": document.id,
                "title": document.title,
                "source_type": document.source_type,
                "source_url": document.source_url,
                "metadata": document.doc_metadata,
            },
        }
        for chunk, document, similarity in rows
    ]
