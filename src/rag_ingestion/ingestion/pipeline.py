"""Ingestion driver — one document at a time, one call at a time.

For every file in the input directory::

    extract → chunk → embed (per chunk) → ensure collection → upsert batches

A failure while extracting, embedding or bootstrapping the collection
discards that document's records and moves on; a failed batch stops the
document's remaining batches.  Only a missing input directory or invalid
configuration stops the run.

Usage::

    from rag_ingestion.config import settings
    from rag_ingestion.ingestion.pipeline import build_pipeline

    summary = build_pipeline(settings).run(settings.data_dir)
    print(summary.describe())
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from rag_ingestion.errors import (
    CollectionError,
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
)
from rag_ingestion.ingestion.chunker import BoundaryTextSplitter, chunk_document
from rag_ingestion.ingestion.collection import CollectionManager
from rag_ingestion.ingestion.embedder import EmbeddingClient
from rag_ingestion.ingestion.loader import discover_documents, load_document
from rag_ingestion.ingestion.models import (
    Chunk,
    DistanceMetric,
    DocumentReport,
    DocumentStatus,
    IndexPoint,
    RunSummary,
    SourceDocument,
)
from rag_ingestion.ingestion.upsert import BatchUpserter
from rag_ingestion.vectorstore.base import VectorStoreBase

if TYPE_CHECKING:
    from rag_ingestion.config import Settings

logger = logging.getLogger(__name__)

POINT_ID_STRATEGIES = ("stable", "random")

# Fixed namespace so stable ids are identical across machines and runs.
POINT_ID_NAMESPACE = uuid.UUID("6f1c5a8e-3b0d-5e47-9a52-2d8c1f4b7e90")


def point_id(source: str, chunk_index: int, strategy: str = "stable") -> str:
    """Return the identifier for chunk *chunk_index* of document *source*.

    ``stable`` ids are a UUIDv5 of ``"<source>#<chunk_index>"``, so an
    unchanged document re-ingested into the same collection overwrites its
    own points.  ``random`` ids are fresh UUIDv4s, so every run adds points.
    """
    if strategy == "stable":
        return str(uuid.uuid5(POINT_ID_NAMESPACE, f"{source}#{chunk_index}"))
    if strategy == "random":
        return str(uuid.uuid4())
    raise ConfigurationError(
        f"Unsupported point_id_strategy={strategy!r}. Expected one of {POINT_ID_STRATEGIES}."
    )


def build_point(document: SourceDocument, chunk: Chunk, vector: list[float], strategy: str = "stable") -> IndexPoint:
    """Assemble the index point for one embedded chunk."""
    payload = {
        "content": chunk.text,
        "source": document.source,
        "chunk_index": chunk.index,
        **document.extraction_metadata(),
    }
    return IndexPoint(id=point_id(document.source, chunk.index, strategy), vector=vector, payload=payload)


class IngestionPipeline:
    """Drive documents through extraction, chunking, embedding and indexing.

    Every collaborator is passed in, so tests can substitute fakes for the
    embedding service and the vector store.

    Parameters
    ----------
    embedder:
        Client producing one vector per chunk.
    store:
        Vector-store backend receiving the points.
    collection_name:
        Target collection; created lazily from the first vector's length.
    splitter:
        Chunker configured with the maximum chunk size and overlap.
    batch_size:
        Maximum number of points per upsert request.
    distance:
        Distance metric used if the collection has to be created.
    extensions:
        File extensions picked up by :meth:`run`.
    progress_every:
        Log a progress line after every *progress_every* embedded chunks.
    point_id_strategy:
        ``"stable"`` or ``"random"``; see :func:`point_id`.
    """

    def __init__(
        self,
        embedder: EmbeddingClient,
        store: VectorStoreBase,
        collection_name: str,
        *,
        splitter: BoundaryTextSplitter | None = None,
        batch_size: int = 50,
        distance: DistanceMetric | str = DistanceMetric.COSINE,
        extensions: Iterable[str] = (".pdf", ".md", ".txt"),
        progress_every: int = 10,
        point_id_strategy: str = "stable",
    ) -> None:
        if point_id_strategy not in POINT_ID_STRATEGIES:
            raise ConfigurationError(
                f"Unsupported point_id_strategy={point_id_strategy!r}. "
                f"Expected one of {POINT_ID_STRATEGIES}."
            )
        try:
            self.distance = DistanceMetric(distance)
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported distance metric: {distance!r}") from exc

        self.embedder = embedder
        self.store = store
        self.collection_name = collection_name
        self.splitter = splitter if splitter is not None else BoundaryTextSplitter()
        self.extensions = tuple(extensions)
        self.progress_every = max(progress_every, 1)
        self.point_id_strategy = point_id_strategy
        self.collections = CollectionManager(store)
        self.upserter = BatchUpserter(store, collection_name, batch_size)

    # -- public API -----------------------------------------------------------

    def run(self, data_dir: str | Path) -> RunSummary:
        """Ingest every supported file in *data_dir*, in file-name order.

        Raises
        ------
        ConfigurationError
            If *data_dir* does not exist.  No other error aborts the run.
        """
        files = discover_documents(data_dir, self.extensions)
        summary = RunSummary(data_dir=str(data_dir), collection_name=self.collection_name)

        for position, path in enumerate(files, 1):
            logger.info("[%d/%d] Processing: %s", position, len(files), path.name)
            report = self.ingest_file(path)
            summary.documents.append(report)
            logger.info(
                "Progress: %d/%d documents, %d points indexed so far",
                position, len(files), summary.total_points,
            )

        summary.finished_at = datetime.now(timezone.utc)
        logger.info("Ingestion completed: %s", summary.describe())
        return summary

    def ingest_file(self, path: str | Path) -> DocumentReport:
        """Extract and ingest a single file."""
        path = Path(path)
        try:
            document = load_document(path)
        except ExtractionError as exc:
            logger.error("  Error processing %s: %s", path.name, exc, exc_info=exc)
            return DocumentReport(source=path.name, status=DocumentStatus.FAILED, error=str(exc))
        logger.info("  Extracted %d characters.", document.char_count)
        return self.ingest_document(document)

    def ingest_document(self, document: SourceDocument) -> DocumentReport:
        """Run chunk → embed → bootstrap → index for an already-extracted document."""
        chunks = chunk_document(document, self.splitter)
        logger.info("  Split into %d chunks.", len(chunks))
        if not chunks:
            logger.warning("  %s has no text to index; skipping.", document.source)
            return DocumentReport(source=document.source, status=DocumentStatus.EMPTY)

        try:
            points = self._embed_chunks(document, chunks)
            self.collections.ensure_collection(self.collection_name, points[0].dimension, self.distance)
        except (EmbeddingError, CollectionError) as exc:
            logger.error("  Error processing %s: %s", document.source, exc, exc_info=exc)
            return DocumentReport(
                source=document.source,
                status=DocumentStatus.FAILED,
                chunks=len(chunks),
                error=str(exc),
            )

        upsert = self.upserter.upsert_all(points)
        if upsert.complete:
            logger.info("  Indexed %d chunks.", upsert.points_written)
            return DocumentReport(
                source=document.source,
                status=DocumentStatus.INDEXED,
                chunks=len(chunks),
                points_indexed=upsert.points_written,
            )

        failed = next(b for b in upsert.batches if not b.ok)
        status = DocumentStatus.PARTIAL if upsert.points_written else DocumentStatus.FAILED
        logger.error(
            "  %s %s: batch %d/%d failed after %d of %d points were indexed",
            status.value.capitalize(), document.source, failed.index + 1,
            upsert.total_batches, upsert.points_written, upsert.total_points,
        )
        return DocumentReport(
            source=document.source,
            status=status,
            chunks=len(chunks),
            points_indexed=upsert.points_written,
            error=f"batch {failed.index + 1}/{upsert.total_batches}: {failed.error}",
        )

    # -- internals ------------------------------------------------------------

    def _embed_chunks(self, document: SourceDocument, chunks: list[Chunk]) -> list[IndexPoint]:
        """Embed *chunks* in order; any failure discards all of them."""
        points: list[IndexPoint] = []
        for chunk in chunks:
            try:
                vector = self.embedder.embed(chunk.text)
            except EmbeddingError as exc:
                exc.source = document.source
                exc.chunk_index = chunk.index
                raise
            points.append(build_point(document, chunk, vector, self.point_id_strategy))
            if len(points) % self.progress_every == 0:
                logger.info("  embedded %d / %d", len(points), len(chunks))
        return points


def build_pipeline(settings: Settings) -> IngestionPipeline:
    """Wire an :class:`IngestionPipeline` from *settings*.

    Raises
    ------
    ConfigurationError
        On an invalid chunk size / overlap, batch size, distance metric,
        point-id strategy or store type.
    """
    from rag_ingestion.ingestion.embedder import get_embedding_function
    from rag_ingestion.vectorstore import get_vector_store

    splitter = BoundaryTextSplitter(chunk_size=settings.chunk_size, chunk_overlap=settings.chunk_overlap)
    return IngestionPipeline(
        embedder=EmbeddingClient(get_embedding_function(settings), settings.embedding_model),
        store=get_vector_store(settings),
        collection_name=settings.collection_name,
        splitter=splitter,
        batch_size=settings.upsert_batch_size,
        distance=settings.distance_metric,
        extensions=settings.supported_extensions,
        progress_every=settings.progress_every,
        point_id_strategy=settings.point_id_strategy,
    )
