"""Embedding client — one text segment in, one vector out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_ollama import OllamaEmbeddings

from rag_ingestion.errors import EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from rag_ingestion.config import Settings

logger = logging.getLogger(__name__)


def get_embedding_function(settings: Settings) -> OllamaEmbeddings:
    """Return the configured Ollama embedding function."""
    logger.info("Using Ollama embeddings: %s (model=%s)", settings.ollama_base_url, settings.embedding_model)
    return OllamaEmbeddings(model=settings.embedding_model, base_url=settings.ollama_base_url)


class EmbeddingClient:
    """Adapter over any LangChain :class:`Embeddings` implementation.

    Each call to :meth:`embed` is exactly one request to the embedding
    service; nothing is batched or issued concurrently.

    Parameters
    ----------
    embeddings:
        The LangChain embedding function doing the actual work.
    model_name:
        Model identifier, recorded in logs.
    """

    def __init__(self, embeddings: Embeddings, model_name: str = "") -> None:
        self._embeddings = embeddings
        self.model_name = model_name or getattr(embeddings, "model", "") or type(embeddings).__name__

    def embed(self, text: str) -> list[float]:
        """Embed a single text segment.

        Raises
        ------
        EmbeddingError
            If the service call fails or returns an empty or non-numeric vector.
        """
        try:
            vector = self._embeddings.embed_query(text)
        except Exception as exc:
            raise EmbeddingError(f"Embedding request to {self.model_name!r} failed: {exc}") from exc
        if not vector:
            raise EmbeddingError(f"Embedding model {self.model_name!r} returned an empty vector")
        try:
            return [float(x) for x in vector]
        except (TypeError, ValueError) as exc:
            raise EmbeddingError(f"Embedding model {self.model_name!r} returned a malformed vector: {exc}") from exc
