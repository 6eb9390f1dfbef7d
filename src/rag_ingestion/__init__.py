"""rag_ingestion — load documents, chunk them, embed them, index them.

Public surface
--------------
- :class:`~rag_ingestion.ingestion.pipeline.IngestionPipeline` — the driver.
- :func:`~rag_ingestion.ingestion.pipeline.build_pipeline` — wire a driver from settings.
- :mod:`rag_ingestion.errors` — the error taxonomy.
"""

__version__ = "0.1.0"
