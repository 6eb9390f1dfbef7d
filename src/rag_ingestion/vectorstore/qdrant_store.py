"""Qdrant implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from qdrant_client import QdrantClient
from qdrant_client.http import models as rest

from rag_ingestion.errors import UpsertError
from rag_ingestion.ingestion.models import CollectionSpec, DistanceMetric, IndexPoint
from rag_ingestion.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)

_DISTANCE_MAP = {
    DistanceMetric.COSINE: rest.Distance.COSINE,
    DistanceMetric.EUCLID: rest.Distance.EUCLID,
    DistanceMetric.DOT: rest.Distance.DOT,
}


class QdrantVectorStore(VectorStoreBase):
    """Qdrant-backed vector store.

    Parameters
    ----------
    client:
        A ready :class:`QdrantClient`.  When *None*, one is created for *url*.
    url:
        Qdrant REST endpoint, e.g. ``http://localhost:6333``.
    api_key:
        Optional API key (Qdrant Cloud).
    """

    def __init__(
        self,
        client: QdrantClient | None = None,
        *,
        url: str = "http://localhost:6333",
        api_key: str | None = None,
    ) -> None:
        self._client = client if client is not None else QdrantClient(url=url, api_key=api_key or None)

    # -- VectorStoreBase overrides --------------------------------------------

    def list_collections(self) -> list[str]:
        return [c.name for c in self._client.get_collections().collections]

    def create_collection(self, spec: CollectionSpec) -> None:
        logger.debug("Creating Qdrant collection %s (size=%d, distance=%s)", spec.name, spec.vector_size, spec.distance.value)
        self._client.create_collection(
            collection_name=spec.name,
            vectors_config=rest.VectorParams(size=spec.vector_size, distance=_DISTANCE_MAP[spec.distance]),
        )

    def upsert(self, collection_name: str, points: Sequence[IndexPoint], *, wait: bool = True) -> None:
        result = self._client.upsert(
            collection_name=collection_name,
            points=[rest.PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points],
            wait=wait,
        )
        if wait and result.status != rest.UpdateStatus.COMPLETED:
            raise UpsertError(f"Qdrant did not complete the upsert (status={result.status})")

    def count(self, collection_name: str) -> int:
        return self._client.count(collection_name=collection_name, exact=True).count
