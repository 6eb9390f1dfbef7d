"""
Vector stores — the narrow write contract the ingestion pipeline needs.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend.
- :class:`QdrantVectorStore` — default Qdrant backend.
- :class:`ChromaVectorStore` — Chroma backend.
- :func:`get_vector_store` — build the backend named in the settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rag_ingestion.errors import ConfigurationError
from rag_ingestion.vectorstore.base import VectorStoreBase

if TYPE_CHECKING:
    from rag_ingestion.config import Settings

__all__ = [
    "ChromaVectorStore",
    "QdrantVectorStore",
    "VectorStoreBase",
    "get_vector_store",
]


def get_vector_store(settings: Settings) -> VectorStoreBase:
    """Return the backend selected by ``settings.vector_db_type``."""
    kind = settings.vector_db_type.lower()
    if kind == "qdrant":
        from rag_ingestion.vectorstore.qdrant_store import QdrantVectorStore

        return QdrantVectorStore(url=settings.qdrant_url, api_key=settings.qdrant_api_key)
    if kind == "chroma":
        from rag_ingestion.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore(host=settings.chroma_host, port=settings.chroma_port)
    raise ConfigurationError(
        f"Unsupported vector_db_type={settings.vector_db_type!r}. Expected 'qdrant' or 'chroma'."
    )


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in both clients at import time."""
    if name == "QdrantVectorStore":
        from rag_ingestion.vectorstore.qdrant_store import QdrantVectorStore

        return QdrantVectorStore
    if name == "ChromaVectorStore":
        from rag_ingestion.vectorstore.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
