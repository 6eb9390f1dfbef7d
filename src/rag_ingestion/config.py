"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rag_ingestion.ingestion.models import DistanceMetric


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Vector store
    vector_db_type: str = Field(default="qdrant", description="Store backend: 'qdrant' or 'chroma'")
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str = ""
    collection_name: str = Field(
        default="knowledge_base",
        validation_alias="QDRANT_COLLECTION",
        description="Target collection / index name",
    )
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    distance_metric: DistanceMetric = DistanceMetric.COSINE

    # Embedding
    ollama_base_url: str = "http://localhost:11434"
    embedding_model: str = Field(default="bge-m3", validation_alias="OLLAMA_EMBEDDING_MODEL")

    # Input
    data_dir: Path = Path("dataforseed")
    supported_extensions: list[str] = [".pdf", ".md", ".txt"]

    # Chunking / indexing
    chunk_size: int = 1000
    chunk_overlap: int = 200
    upsert_batch_size: int = 50
    progress_every: int = 10
    point_id_strategy: str = Field(
        default="stable",
        description=(
            "'stable' derives point ids from (source, chunk index) so re-ingesting "
            "overwrites; 'random' issues fresh ids each run (additive)."
        ),
    )

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


# Singleton — import `settings` wherever needed.
settings = Settings()
