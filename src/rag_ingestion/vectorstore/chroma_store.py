"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import chromadb

from rag_ingestion.errors import UpsertError
from rag_ingestion.ingestion.models import CollectionSpec, DistanceMetric, IndexPoint
from rag_ingestion.vectorstore.base import VectorStoreBase

logger = logging.getLogger(__name__)

_DISTANCE_MAP = {
    DistanceMetric.COSINE: "cosine",
    DistanceMetric.EUCLID: "l2",
    DistanceMetric.DOT: "ip",
}

# Payload key stored as the Chroma document rather than as metadata.
CONTENT_KEY = "content"


def _flatten_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Chroma metadata values must be flat str/int/float/bool."""
    meta: dict[str, Any] = {}
    for k, v in payload.items():
        if k == CONTENT_KEY:
            continue
        if isinstance(v, (str, int, float, bool)):
            meta[k] = v
        elif isinstance(v, dict):
            for sub_k, sub_v in v.items():
                if isinstance(sub_v, (str, int, float, bool)):
                    meta[f"{k}.{sub_k}"] = sub_v
    return meta


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Chroma has no explicit dimensionality setting: it fixes the dimension
    on the first write.  The requested size is kept in the collection
    metadata under ``"dimension"`` so it can still be inspected.

    Parameters
    ----------
    client:
        A ready Chroma client.  When *None*, an ``HttpClient`` is created.
    host / port:
        Chroma server connection details.
    """

    def __init__(
        self,
        client: Any | None = None,
        *,
        host: str = "localhost",
        port: int = 8000,
    ) -> None:
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)

    # -- VectorStoreBase overrides --------------------------------------------

    def list_collections(self) -> list[str]:
        # chromadb < 0.6 returns Collection objects, later versions return names.
        return [getattr(c, "name", c) for c in self._client.list_collections()]

    def create_collection(self, spec: CollectionSpec) -> None:
        logger.debug("Creating Chroma collection %s (size=%d, space=%s)", spec.name, spec.vector_size, _DISTANCE_MAP[spec.distance])
        self._client.create_collection(
            name=spec.name,
            metadata={"hnsw:space": _DISTANCE_MAP[spec.distance], "dimension": spec.vector_size},
        )

    def upsert(self, collection_name: str, points: Sequence[IndexPoint], *, wait: bool = True) -> None:
        # Chroma writes are synchronous; every returned call is acknowledged.
        collection = self._client.get_collection(collection_name)
        expected = (collection.metadata or {}).get("dimension")
        for p in points:
            if expected is not None and len(p.vector) != expected:
                raise UpsertError(
                    f"Point {p.id} has dimension {len(p.vector)}, collection "
                    f"'{collection_name}' expects {expected}"
                )
        collection.upsert(
            ids=[p.id for p in points],
            embeddings=[p.vector for p in points],
            documents=[str(p.payload.get(CONTENT_KEY, "")) for p in points],
            metadatas=[_flatten_payload(p.payload) for p in points],
        )

    def count(self, collection_name: str) -> int:
        return self._client.get_collection(collection_name).count()
