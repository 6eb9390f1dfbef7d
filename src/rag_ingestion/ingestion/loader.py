"""Document discovery and text extraction — thin wrappers around LangChain loaders."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from langchain_community.document_loaders import PyPDFLoader, TextLoader

from rag_ingestion.errors import ConfigurationError, ExtractionError
from rag_ingestion.ingestion.models import SourceDocument

logger = logging.getLogger(__name__)

TEXT_FORMATS = {".txt": "text", ".md": "markdown", ".markdown": "markdown"}
PDF_EXTENSION = ".pdf"

# Per-page keys PyPDFLoader adds that say nothing about the document itself.
_PAGE_KEYS = {"source", "page", "page_label", "total_pages"}


def discover_documents(path: str | Path, extensions: Iterable[str]) -> list[Path]:
    """List the files directly inside *path* whose extension is in *extensions*.

    Matching is case-insensitive and the result is sorted by file name so
    every run processes documents in the same order.

    Raises
    ------
    ConfigurationError
        If *path* does not exist or is not a directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise ConfigurationError(f"Data directory not found: {root}")

    wanted = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
    files = sorted(
        (p for p in root.iterdir() if p.is_file() and p.suffix.lower() in wanted),
        key=lambda p: p.name,
    )
    logger.info("Found %d candidate files in %s", len(files), root)
    return files


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def load_pdf(path: str | Path) -> SourceDocument:
    """Extract the text of every page of a PDF into one document."""
    path = Path(path)
    pages = PyPDFLoader(str(path)).load()
    info: dict[str, Any] = {}
    if pages:
        info = {k: _jsonable(v) for k, v in pages[0].metadata.items() if k not in _PAGE_KEYS}
    return SourceDocument(
        source=path.name,
        path=path,
        text="\n".join(page.page_content for page in pages),
        page_count=len(pages),
        format="pdf",
        info=info,
    )


def load_text(path: str | Path) -> SourceDocument:
    """Read a plain-text or Markdown file as UTF-8."""
    path = Path(path)
    docs = TextLoader(str(path), encoding="utf-8").load()
    return SourceDocument(
        source=path.name,
        path=path,
        text="".join(doc.page_content for doc in docs),
        format=TEXT_FORMATS.get(path.suffix.lower(), "text"),
    )


def load_document(path: str | Path) -> SourceDocument:
    """Extract text and metadata from a single supported file.

    Raises
    ------
    ExtractionError
        If the format is unsupported or the file is unreadable / corrupt.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == PDF_EXTENSION:
            return load_pdf(path)
        if suffix in TEXT_FORMATS:
            return load_text(path)
    except Exception as exc:
        raise ExtractionError(f"Could not extract text from {path.name}: {exc}", source=path.name) from exc
    raise ExtractionError(f"Unsupported file type: {path.name}", source=path.name)
