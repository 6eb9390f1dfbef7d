"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings

from rag_ingestion.config import Settings
from rag_ingestion.ingestion.chunker import BoundaryTextSplitter
from rag_ingestion.ingestion.embedder import EmbeddingClient
from rag_ingestion.ingestion.models import CollectionSpec, IndexPoint
from rag_ingestion.ingestion.pipeline import IngestionPipeline
from rag_ingestion.vectorstore.base import VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes ───────────────────────────────────────────────────────────────


class InMemoryVectorStore(VectorStoreBase):
    """Dict-backed store that records every call in order.

    Set ``fail_on_upsert`` to the 1-based number of the upsert call that
    should be rejected, or ``fail_create`` / ``fail_list`` to simulate an
    unreachable store.
    """

    def __init__(self) -> None:
        self.specs: dict[str, CollectionSpec] = {}
        self.points: dict[str, dict[str, IndexPoint]] = {}
        self.calls: list[tuple] = []
        self.fail_on_upsert: int | None = None
        self.fail_create = False
        self.fail_list = False
        self._upserts = 0

    def list_collections(self) -> list[str]:
        self.calls.append(("list",))
        if self.fail_list:
            raise ConnectionError("store unreachable")
        return list(self.specs)

    def create_collection(self, spec: CollectionSpec) -> None:
        self.calls.append(("create", spec.name, spec.vector_size, spec.distance))
        if self.fail_create:
            raise RuntimeError("creation rejected")
        if spec.name in self.specs:
            raise RuntimeError(f"collection {spec.name} already exists")
        self.specs[spec.name] = spec
        self.points[spec.name] = {}

    def upsert(self, collection_name: str, points: Sequence[IndexPoint], *, wait: bool = True) -> None:
        self._upserts += 1
        self.calls.append(("upsert", collection_name, [p.id for p in points], wait))
        if self.fail_on_upsert == self._upserts:
            raise RuntimeError("batch rejected")
        spec = self.specs[collection_name]
        for p in points:
            if len(p.vector) != spec.vector_size:
                raise ValueError("dimension mismatch")
            self.points[collection_name][p.id] = p

    def count(self, collection_name: str) -> int:
        return len(self.points.get(collection_name, {}))

    def upsert_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] == "upsert"]


class FlakyEmbeddings(Embeddings):
    """Deterministic fake embeddings that fail on the *fail_on*-th query.

    ``malformed_on`` makes that query return a vector of ``None`` values.
    """

    def __init__(self, size: int = 768, fail_on: int | None = None, malformed_on: int | None = None) -> None:
        self._inner = DeterministicFakeEmbedding(size=size)
        self.size = size
        self.fail_on = fail_on
        self.malformed_on = malformed_on
        self.calls = 0

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.calls += 1
        if self.fail_on is not None and self.calls == self.fail_on:
            raise ConnectionError("embedding service unavailable")
        if self.malformed_on is not None and self.calls == self.malformed_on:
            return [None] * self.size  # type: ignore[list-item]
        return self._inner.embed_query(text)


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture()
def embeddings() -> FlakyEmbeddings:
    return FlakyEmbeddings(size=768)


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, data_dir=tmp_path / "docs", collection_name="test_kb")


@pytest.fixture()
def make_pipeline(store: InMemoryVectorStore, embeddings: FlakyEmbeddings):
    """Factory building an :class:`IngestionPipeline` over the in-memory fakes."""

    def _make(**kwargs) -> IngestionPipeline:
        chunk_size = kwargs.pop("chunk_size", 100)
        chunk_overlap = kwargs.pop("chunk_overlap", 10)
        kwargs.setdefault("batch_size", 50)
        return IngestionPipeline(
            embedder=EmbeddingClient(kwargs.pop("embeddings", embeddings), "fake-embed"),
            store=kwargs.pop("store", store),
            collection_name=kwargs.pop("collection_name", "test_kb"),
            splitter=BoundaryTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap),
            **kwargs,
        )

    return _make
