"""Idempotent bootstrap of the target vector collection."""

from __future__ import annotations

import logging

from rag_ingestion.errors import CollectionError
from rag_ingestion.ingestion.models import CollectionSpec, DistanceMetric
from rag_ingestion.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)


class CollectionManager:
    """Make sure a named collection exists before anything is written to it.

    An existing collection is trusted as-is: its dimensionality is never
    re-verified, resized or recreated.  Creation is check-then-create, so
    two processes racing on the same name are left to the store to settle.
    """

    def __init__(self, store: VectorStoreBase) -> None:
        self._store = store

    def ensure_collection(
        self,
        name: str,
        vector_size: int,
        distance: DistanceMetric | str = DistanceMetric.COSINE,
    ) -> bool:
        """Create *name* with *vector_size* / *distance* unless it already exists.

        Returns
        -------
        bool
            ``True`` if the collection was created by this call.

        Raises
        ------
        CollectionError
            If the store is unreachable or rejects the creation.
        """
        try:
            spec = CollectionSpec(name=name, vector_size=vector_size, distance=distance)
        except ValueError as exc:
            raise CollectionError(f"Invalid collection spec for {name!r}: {exc}") from exc

        try:
            if self._store.collection_exists(name):
                logger.debug("Collection '%s' already exists", name)
                return False
            logger.info(
                "Creating collection '%s' with vector size %d (%s)",
                name, vector_size, spec.distance.value,
            )
            self._store.create_collection(spec)
        except Exception as exc:
            logger.error("Error checking/creating collection '%s': %s", name, exc, exc_info=exc)
            raise CollectionError(f"Could not ensure collection {name!r}: {exc}") from exc
        return True
