"""KFP v2 pipeline — knowledge-base ingestion.

A single step running the ingestion driver against a directory mounted
into the container.  Documents are processed strictly one at a time, so
the step is not split further.

Compile
-------
    python -m pipelines.ingestion_pipeline --compile
"""

from kfp import compiler, dsl

from pipelines.components.ingest import ingest_documents


# ──────────────────────────────────────────────────────────────────────
# Pipeline definition
# ──────────────────────────────────────────────────────────────────────


@dsl.pipeline(
    name="rag-ingestion-pipeline",
    description=(
        "Knowledge-base ingestion: extract documents → chunk text → "
        "embed each chunk → ensure collection → upsert in batches."
    ),
)
def ingestion_pipeline(
    # ── Source ──────────────────────────────────────────────────────
    source_path: str = "/data/documents",
    # ── Chunking ───────────────────────────────────────────────────
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    # ── Embedding ──────────────────────────────────────────────────
    ollama_base_url: str = "http://ollama.kubeflow.svc.cluster.local:11434",
    embedding_model: str = "bge-m3",
    # ── Vector DB ──────────────────────────────────────────────────
    qdrant_url: str = "http://qdrant.kubeflow.svc.cluster.local:6333",
    collection_name: str = "knowledge_base",
    vector_db_type: str = "qdrant",
    distance_metric: str = "cosine",
    upsert_batch_size: int = 50,
) -> None:
    """Ingest every supported document under *source_path*."""
    ingest_documents(
        source_path=source_path,
        qdrant_url=qdrant_url,
        collection_name=collection_name,
        ollama_base_url=ollama_base_url,
        embedding_model=embedding_model,
        vector_db_type=vector_db_type,
        distance_metric=distance_metric,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        upsert_batch_size=upsert_batch_size,
    )


# ──────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="RAG ingestion pipeline")
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Compile pipeline to YAML",
    )
    parser.add_argument(
        "--output",
        default="pipelines/compiled/ingestion_pipeline.yaml",
        help="Output path for compiled YAML",
    )
    args = parser.parse_args()

    if args.compile:
        compiler.Compiler().compile(ingestion_pipeline, args.output)
        print(f"Pipeline compiled → {args.output}")
