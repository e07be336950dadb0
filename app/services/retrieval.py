from typing import List, Dict, Any, Optional
from uuid import UUID

from sqlalchemy.orm import Session
from langchain_core.embeddings import Embeddings

from app.models.chunk import Chunk
from app.models.document import Document
from app.services.vectorstore import semantic_search

MIN_TOKEN_LENGTH = 3
PHRASE_BONUS = 10
KEYWORD_BONUS = 5


def tokenize_query(query: str) -> List[str]:
    return [word for word in query.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


def score_chunk(content: str, query: str, tokens: List[str], keywords: Optional[List[str]] = None) -> float:
    """
    Keyword density of a chunk for ``tokens``, per 100 characters.

    occurrences of each token + 10 if the whole query appears verbatim
    + 5 for each chunk keyword that is one of the tokens
    """
    text = content.lower()
    if not text:
        return 0.0

    score = sum(text.count(token) for token in tokens)

    if query.lower() in text:
        score += PHRASE_BONUS

    for keyword in keywords or []:
        if keyword in tokens:
            score += KEYWORD_BONUS

    return score / (len(text) / 100)


def _document_info(document: Document) -> Dict[str, Any]:
    return {
        "id": document.id,
        "title": document.title,
        "source_type": document.source_type,
        "source_url": document.source_url,
        "metadata": document.doc_metadata,
    }


def keyword_search(
    db: Session,
    query: str,
    owner_id: UUID,
    limit: int = 5,
    public_only: bool = False,
) -> List[Dict[str, Any]]:
    """Rank the owner's chunks by keyword density; zero-score chunks are dropped"""
    tokens = tokenize_query(query)
    if not tokens:
        return []

    chunks = db.query(Chunk).filter(Chunk.user_id == owner_id).all()

    scored = []
    for chunk in chunks:
        score = score_chunk(chunk.content, query, tokens, chunk.keywords)
        if score > 0:
            scored.append((chunk, score))

    results = []
    documents: Dict[UUID, Optional[Document]] = {}
    for chunk, score in scored:
        if chunk.document_id not in documents:
            documents[chunk.document_id] = db.query(Document).filter(Document.id == chunk.document_id).first()
        document = documents[chunk.document_id]
        if not document or (public_only and not document.is_public):
            continue
        results.append({
            "chunk_id": chunk.id,
            "content": chunk.content,
            "chunk_index": chunk.chunk_index,
            "score": score,
            "document": _document_info(document),
        })

    results.sort(key=lambda r: r["score"], reverse=True)
    return results[:limit]


def hybrid_search(
    db: Session,
    embeddings_model: Optional[Embeddings],
    query: str,
    owner_id: UUID,
    limit: int = 5,
    vector_weight: float = 0.7,
    keyword_weight: float = 0.3,
    public_only: bool = False,
) -> List[Dict[str, Any]]:
    """
    Weighted blend of cosine similarity and keyword density.

    Keyword scores are unbounded densities, so they are divided by the best
    keyword score in the candidate set before weighting. With no embeddings
    model this degrades to keyword ranking.
    """
    candidates = limit * 4
    vector_hits = semantic_search(
        db, embeddings_model, query, owner_id,
        limit=candidates, threshold=0.0, public_only=public_only,
    )
    keyword_hits = keyword_search(db, query, owner_id, limit=candidates, public_only=public_only)

    max_keyword = max((hit["score"] for hit in keyword_hits), default=0.0)

    combined: Dict[UUID, Dict[str, Any]] = {}
    for hit in vector_hits:
        combined[hit["chunk_id"]] = {**hit, "score": vector_weight * hit["score"]}

    for hit in keyword_hits:
        normalized = hit["score"] / max_keyword if max_keyword else 0.0
        if hit["chunk_id"] in combined:
            combined[hit["chunk_id"]]["score"] += keyword_weight * normalized
        else:
            combined[hit["chunk_id"]] = {**hit, "score": keyword_weight * normalized}

    results = sorted(combined.values(), key=lambda r: r["score"], reverse=True)
    return [r for r in results if r["score"] > 0][:limit]


def get_context_for_ai_chat(
    db: Session,
    embeddings_model: Optional[Embeddings],
    query: str,
    owner_id: UUID,
    conversation_history: Optional[List[Dict[str, str]]] = None,
    limit: int = 5,
) -> List[Dict[str, Any]]:
    """
    Snippets from the owner's public documents relevant to the latest user
    message, for the persona prompt.
    """
    # Earlier user turns help short follow-ups like "tell me more"
    previous_turns = [
        turn["content"] for turn in conversation_history or []
        if turn.get("role") == "user" and turn.get("content") != query
    ][-2:]
    search_query = " ".join([*previous_turns, query]) if previous_turns else query

    hits = hybrid_search(db, embeddings_model, search_query, owner_id, limit=limit, public_only=True)
    return [
        {
            "content": hit["content"],
            "document_id": hit["document"]["id"],
            "source": hit["document"]["title"],
            "source_type": getattr(hit["document"]["source_type"], "value", hit["document"]["source_type"]),
            "relevance_score": hit["score"],
        }
        for hit in hits
    ]
