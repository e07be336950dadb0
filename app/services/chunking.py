from typing import List, Dict, Any

MAX_CHUNK_SIZE = 1000  # characters
PARAGRAPH_SEPARATOR = "\n\n"


def chunk_document(content: str, max_chunk_size: int = MAX_CHUNK_SIZE) -> List[Dict[str, Any]]:
    """
    Build retrieval chunks from blank-line separated paragraphs.

    Paragraphs are packed greedily: the buffer is flushed when adding the
    next paragraph would push it past ``max_chunk_size`` and the buffer is
    not empty. A single paragraph longer than the limit becomes one
    oversized chunk; it is never split further.

    Returns dicts with ``text``, ``chunk_index`` and the ``start``/``end``
    character offsets of the chunk's paragraphs in ``content``.
    """
    if not content:
        return []

    # (paragraph, start, end) with offsets into the original text
    paragraphs = []
    position = 0
    for part in content.split(PARAGRAPH_SEPARATOR):
        if part.strip():
            paragraphs.append((part, position, position + len(part)))
        position += len(part) + len(PARAGRAPH_SEPARATOR)

    chunks = []
    buffer = ""
    start = end = 0

    def flush():
        chunks.append({
            "text": buffer.strip(),
            "chunk_index": len(chunks),
            "start": start,
            "end": end,
        })

    for paragraph, p_start, p_end in paragraphs:
        if buffer and len(buffer) + len(PARAGRAPH_SEPARATOR) + len(paragraph) > max_chunk_size:
            flush()
            buffer = paragraph
            start = p_start
        elif buffer:
            buffer += PARAGRAPH_SEPARATOR + paragraph
        else:
            buffer = paragraph
            start = p_start
        end = p_end

    if buffer.strip():
        flush()

    return chunks
