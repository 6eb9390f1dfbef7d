"""Batched, acknowledgment-gated writes of index points."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from rag_ingestion.errors import ConfigurationError
from rag_ingestion.ingestion.models import BatchResult, IndexPoint, UpsertReport
from rag_ingestion.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)


def iter_batches(points: Sequence[IndexPoint], batch_size: int) -> Iterator[Sequence[IndexPoint]]:
    """Yield consecutive slices of *points* holding at most *batch_size* items."""
    if batch_size < 1:
        raise ConfigurationError(f"upsert batch size ({batch_size}) must be >= 1")
    for start in range(0, len(points), batch_size):
        yield points[start : start + batch_size]


class BatchUpserter:
    """Write points one batch at a time, waiting for each acknowledgment.

    Only one batch is ever in flight.  The first failed batch stops the
    sequence; there is no retry and no rollback, so batches acknowledged
    before the failure stay in the store.

    Parameters
    ----------
    store:
        Target backend.
    collection_name:
        Collection every batch is written to.
    batch_size:
        Maximum number of points per upsert request.
    """

    def __init__(self, store: VectorStoreBase, collection_name: str, batch_size: int = 50) -> None:
        if batch_size < 1:
            raise ConfigurationError(f"upsert batch size ({batch_size}) must be >= 1")
        self._store = store
        self.collection_name = collection_name
        self.batch_size = batch_size

    def upsert_all(self, points: Sequence[IndexPoint]) -> UpsertReport:
        """Upsert *points* in order; stop at the first failed batch."""
        total_batches = -(-len(points) // self.batch_size)
        report = UpsertReport(total_points=len(points), total_batches=total_batches)

        for index, batch in enumerate(iter_batches(points, self.batch_size)):
            try:
                self._store.upsert(self.collection_name, batch, wait=True)
            except Exception as exc:
                logger.error(
                    "Upsert of batch %d/%d (%d points) into '%s' failed: %s",
                    index + 1, total_batches, len(batch), self.collection_name, exc,
                exc_info=exc,
                )
                report.batches.append(BatchResult(index=index, size=len(batch), ok=False, error=str(exc)))
                break
            report.batches.append(BatchResult(index=index, size=len(batch), ok=True))
            logger.debug("  upserted batch %d/%d (%d points)", index + 1, total_batches, len(batch))

        return report
