"""Domain models flowing through the ingestion pipeline."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DistanceMetric(str, Enum):
    """Similarity function a collection is created with."""

    COSINE = "cosine"
    EUCLID = "euclid"
    DOT = "dot"


class DocumentStatus(str, Enum):
    """Terminal state of one document's trip through the pipeline."""

    INDEXED = "indexed"
    PARTIAL = "partial"
    FAILED = "failed"
    EMPTY = "empty"


class SourceDocument(BaseModel):
    """Extracted text of one input file plus basic extraction metadata.

    Attributes
    ----------
    source:
        Identity of the document — the file name.
    path:
        Location the text was read from.
    text:
        Plain text produced by the extractor.
    page_count:
        Number of pages (``None`` for formats without pages).
    format:
        Short format tag, e.g. ``"pdf"`` or ``"markdown"``.
    info:
        Format-specific metadata reported by the extractor (PDF producer,
        creation date, …).
    """

    source: str
    path: Path | None = None
    text: str
    page_count: int | None = None
    format: str = "text"
    info: dict[str, Any] = Field(default_factory=dict)

    @property
    def char_count(self) -> int:
        return len(self.text)

    def extraction_metadata(self) -> dict[str, Any]:
        """Metadata copied into every point payload built from this document."""
        meta: dict[str, Any] = {"format": self.format}
        if self.page_count is not None:
            meta["total_pages"] = self.page_count
        if self.info:
            meta["info"] = dict(self.info)
        return meta


class Chunk(BaseModel):
    """A bounded, trimmed slice of a document's text."""

    source: str
    index: int
    text: str


class IndexPoint(BaseModel):
    """One record written to the vector store — never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    vector: list[float]
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def dimension(self) -> int:
        return len(self.vector)


class CollectionSpec(BaseModel):
    """Name, dimensionality and distance metric of a vector collection."""

    name: str
    vector_size: int = Field(gt=0)
    distance: DistanceMetric = DistanceMetric.COSINE


class BatchResult(BaseModel):
    """Outcome of a single acknowledged (or failed) upsert request."""

    index: int
    size: int
    ok: bool
    error: str | None = None


class UpsertReport(BaseModel):
    """Per-batch outcomes of :meth:`BatchUpserter.upsert_all`.

    Batches after the first failure are never attempted and therefore
    do not appear in :attr:`batches`.
    """

    total_points: int = 0
    total_batches: int = 0
    batches: list[BatchResult] = Field(default_factory=list)

    @property
    def points_written(self) -> int:
        return sum(b.size for b in self.batches if b.ok)

    @property
    def acknowledged_batches(self) -> int:
        return sum(1 for b in self.batches if b.ok)

    @property
    def failed(self) -> bool:
        return any(not b.ok for b in self.batches)

    @property
    def complete(self) -> bool:
        return not self.failed and self.acknowledged_batches == self.total_batches


class DocumentReport(BaseModel):
    """What happened to one document."""

    source: str
    status: DocumentStatus
    chunks: int = 0
    points_indexed: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (DocumentStatus.INDEXED, DocumentStatus.EMPTY)


class RunSummary(BaseModel):
    """Aggregate result of one pass over an input directory."""

    data_dir: str
    collection_name: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None
    documents: list[DocumentReport] = Field(default_factory=list)

    def count(self, status: DocumentStatus) -> int:
        return sum(1 for d in self.documents if d.status == status)

    @property
    def total_chunks(self) -> int:
        return sum(d.chunks for d in self.documents)

    @property
    def total_points(self) -> int:
        return sum(d.points_indexed for d in self.documents)

    def describe(self) -> str:
        """Return a one-line human summary, e.g. for the final log line."""
        return (
            f"{len(self.documents)} documents: "
            f"{self.count(DocumentStatus.INDEXED)} indexed, "
            f"{self.count(DocumentStatus.PARTIAL)} partial, "
            f"{self.count(DocumentStatus.FAILED)} failed, "
            f"{self.count(DocumentStatus.EMPTY)} empty; "
            f"{self.total_points} points from {self.total_chunks} chunks "
            f"→ collection '{self.collection_name}'"
        )
