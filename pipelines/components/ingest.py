"""KFP v2 component — Ingest a directory of documents into the vector store.

Runs :class:`rag_ingestion.ingestion.pipeline.IngestionPipeline` inside a
container: documents are extracted, chunked, embedded one chunk at a
time through Ollama and upserted batch by batch into the collection.

The component runs on the image built from the repository ``Dockerfile``
(override the tag with ``RAG_INGESTION_IMAGE`` before compiling), so
nothing is pip-installed when the step starts.

Local testing
-------------
    from pipelines.components.ingest import ingest_documents
    ingest_documents.python_func(
        source_path="/data/documents",
        metrics=_FakeArtifact("/tmp/metrics"),
    )
"""

import os

from kfp import dsl

# Built from the repository Dockerfile; rag_ingestion and kfp are preinstalled.
INGESTION_IMAGE = os.environ.get("RAG_INGESTION_IMAGE", "rag-ingestion:0.1.0")


@dsl.component(
    base_image=INGESTION_IMAGE,
    install_kfp_package=False,
)
def ingest_documents(
    source_path: str,
    metrics: dsl.Output[dsl.Metrics],
    qdrant_url: str = "http://qdrant:6333",
    collection_name: str = "knowledge_base",
    ollama_base_url: str = "http://ollama:11434",
    embedding_model: str = "bge-m3",
    vector_db_type: str = "qdrant",
    distance_metric: str = "cosine",
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    upsert_batch_size: int = 50,
) -> str:
    """Load, chunk, embed, and store documents.

    Parameters
    ----------
    source_path:
        Directory of source documents inside the container.
    metrics:
        Output Metrics artifact with per-status document counts.
    qdrant_url / collection_name:
        Vector-store connection details and target collection.
    ollama_base_url / embedding_model:
        Embedding service endpoint and model identifier.
    vector_db_type:
        Backend type (``"qdrant"`` | ``"chroma"``).
    distance_metric:
        ``"cosine"`` | ``"euclid"`` | ``"dot"``
    chunk_size / chunk_overlap:
        Chunking parameters.
    upsert_batch_size:
        Max points per upsert call.

    Returns
    -------
    str
        One-line run summary.
    """
    from rag_ingestion.config import Settings
    from rag_ingestion.ingestion.models import DocumentStatus
    from rag_ingestion.ingestion.pipeline import build_pipeline
    from rag_ingestion.logging_config import configure_logging

    configure_logging("INFO")

    run_settings = Settings(
        qdrant_url=qdrant_url,
        collection_name=collection_name,
        ollama_base_url=ollama_base_url,
        embedding_model=embedding_model,
        vector_db_type=vector_db_type,
        distance_metric=distance_metric,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        upsert_batch_size=upsert_batch_size,
        data_dir=source_path,
    )
    summary = build_pipeline(run_settings).run(source_path)

    # KFP Metrics
    metrics.log_metric("documents_processed", len(summary.documents))
    for status in DocumentStatus:
        metrics.log_metric(f"documents_{status.value}", summary.count(status))
    metrics.log_metric("chunks_produced", summary.total_chunks)
    metrics.log_metric("points_indexed", summary.total_points)

    return summary.describe()
