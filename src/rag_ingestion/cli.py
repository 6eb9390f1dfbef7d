"""Command-line entry point: ingest every document in the data directory.

Exits 1 on a configuration problem (missing data directory, invalid
chunking parameters, unknown backend).  Per-document failures are logged
and summarised but never change the exit status.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rag_ingestion import config
from rag_ingestion.config import Settings
from rag_ingestion.errors import ConfigurationError
from rag_ingestion.ingestion.pipeline import build_pipeline
from rag_ingestion.logging_config import configure_logging

logger = logging.getLogger("rag_ingestion")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rag-ingest",
        description="Chunk, embed and index documents into a vector collection.",
    )
    parser.add_argument("--data-dir", type=Path, help="Directory of source documents (default: DATA_DIR)")
    parser.add_argument("--collection", help="Target collection name (default: QDRANT_COLLECTION)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, *, settings: Settings | None = None) -> int:
    args = _parse_args(argv)
    if settings is None:
        settings = config.settings
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.collection:
        overrides["collection_name"] = args.collection
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)
    logger.info("Starting knowledge base ingestion")
    logger.info("Data directory : %s", settings.data_dir)
    logger.info("Embedding model: %s", settings.embedding_model)
    logger.info("Collection     : %s (%s)", settings.collection_name, settings.vector_db_type)

    try:
        pipeline = build_pipeline(settings)
        summary = pipeline.run(settings.data_dir)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 1

    needs_attention = [d.source for d in summary.documents if not d.ok]
    if needs_attention:
        logger.warning("Documents not fully indexed: %s", ", ".join(needs_attention))
    return 0
