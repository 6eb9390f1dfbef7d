"""Error taxonomy for the ingestion pipeline.

Only :class:`ConfigurationError` is fatal.  Every other subclass is
scoped to a single document: the driver logs it, records it in the
document's report and moves on to the next file.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(IngestionError):
    """Invalid settings or a missing input directory."""


class DocumentError(IngestionError):
    """An error tied to one source document."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ExtractionError(DocumentError):
    """The document could not be read or parsed into text."""


class EmbeddingError(DocumentError):
    """The embedding service failed for one of the document's chunks."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        chunk_index: int | None = None,
    ) -> None:
        super().__init__(message, source=source)
        self.chunk_index = chunk_index


class CollectionError(DocumentError):
    """The store was unreachable or refused to create the collection."""


class UpsertError(DocumentError):
    """A batch write was rejected or never acknowledged."""
