"""Boundary-aware text chunking.

The splitter walks the text left to right in windows of ``chunk_size``
characters.  Each window is pulled back to the nearest paragraph break,
line break or space found in the last ``min(0.2 * chunk_size, 100)``
characters; when none is found the window is cut mid-token.  The next
window starts ``chunk_overlap`` characters before the previous cut.
"""

from __future__ import annotations

from typing import Any

from langchain_text_splitters import TextSplitter

from rag_ingestion.errors import ConfigurationError
from rag_ingestion.ingestion.models import Chunk, SourceDocument

# Highest priority first.
BREAK_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ")
MAX_LOOKBACK = 100
LOOKBACK_RATIO = 0.2


def validate_chunk_params(chunk_size: int, chunk_overlap: int) -> None:
    """Raise :class:`ConfigurationError` unless ``0 <= chunk_overlap < chunk_size``."""
    if chunk_size <= 0:
        raise ConfigurationError(f"chunk_size ({chunk_size}) must be > 0")
    if chunk_overlap < 0:
        raise ConfigurationError(f"chunk_overlap ({chunk_overlap}) must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ConfigurationError(
            f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
        )


def _find_break(text: str, start: int, end: int, overlap: int, lookback: float) -> int | None:
    for sep in BREAK_SEPARATORS:
        # Last occurrence beginning at or before ``end``.
        pos = text.rfind(sep, 0, end + len(sep))
        # The next window starts at pos - overlap; it must land past start.
        if pos > start and pos > end - lookback and pos - overlap > start:
            return pos
    return None


def split_text(text: str, chunk_size: int = 1000, chunk_overlap: int = 200) -> list[str]:
    """Split *text* into overlapping segments of at most *chunk_size* characters.

    Parameters
    ----------
    text:
        Plain text to split.
    chunk_size:
        Maximum character length of each segment.
    chunk_overlap:
        Number of characters the next segment starts before the previous cut.

    Returns
    -------
    list[str]
        Ordered, non-empty, trimmed segments.  Text no longer than
        *chunk_size* is returned verbatim as the only segment.

    Raises
    ------
    ConfigurationError
        If ``chunk_overlap >= chunk_size`` (the walk could never advance).
    """
    validate_chunk_params(chunk_size, chunk_overlap)

    if len(text) <= chunk_size:
        return [text]

    lookback = min(chunk_size * LOOKBACK_RATIO, MAX_LOOKBACK)
    chunks: list[str] = []
    start = 0

    while start < len(text):
        end = start + chunk_size
        if end >= len(text):
            tail = text[start:].strip()
            if tail:
                chunks.append(tail)
            break

        brk = _find_break(text, start, end, chunk_overlap, lookback)
        if brk is not None:
            end = brk

        segment = text[start:end].strip()
        if segment:
            chunks.append(segment)

        start = end - chunk_overlap

    return chunks


class BoundaryTextSplitter(TextSplitter):
    """LangChain ``TextSplitter`` running :func:`split_text`.

    Validates its parameters eagerly so a bad ``chunk_overlap`` fails
    when the pipeline is built, not halfway through the first document.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200, **kwargs: Any) -> None:
        validate_chunk_params(chunk_size, chunk_overlap)
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap, **kwargs)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_text(self, text: str) -> list[str]:
        return split_text(text, self._chunk_size, self._chunk_overlap)


def chunk_document(document: SourceDocument, splitter: BoundaryTextSplitter) -> list[Chunk]:
    """Split *document* into ordered :class:`Chunk` objects.

    Blank documents produce no chunks.
    """
    if not document.text.strip():
        return []
    return [
        Chunk(source=document.source, index=i, text=segment)
        for i, segment in enumerate(splitter.split_text(document.text))
    ]
