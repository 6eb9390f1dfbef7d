"""Unit tests for document discovery and text extraction."""

from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfWriter

from rag_ingestion.errors import ConfigurationError, ExtractionError
from rag_ingestion.ingestion.loader import discover_documents, load_document


@pytest.fixture()
def docs_dir(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    root.mkdir()
    (root / "b_notes.md").write_text("# Notes\n\nSome notes.")
    (root / "a_readme.TXT").write_text("Read me.")
    (root / "c_report.pdf").write_bytes(b"%PDF-1.4 placeholder")
    (root / "image.png").write_bytes(b"\x89PNG")
    (root / "nested").mkdir()
    (root / "nested" / "d.txt").write_text("ignored")
    return root


def _write_blank_pdf(path: Path, pages: int) -> None:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    with open(path, "wb") as fh:
        writer.write(fh)


class TestDiscoverDocuments:
    def test_filters_by_extension_case_insensitively(self, docs_dir: Path) -> None:
        files = discover_documents(docs_dir, [".pdf", ".md", ".txt"])
        assert [f.name for f in files] == ["a_readme.TXT", "b_notes.md", "c_report.pdf"]

    def test_only_requested_extensions(self, docs_dir: Path) -> None:
        files = discover_documents(docs_dir, ["pdf"])
        assert [f.name for f in files] == ["c_report.pdf"]

    def test_does_not_recurse(self, docs_dir: Path) -> None:
        files = discover_documents(docs_dir, [".txt"])
        assert all(f.parent == docs_dir for f in files)

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            discover_documents(tmp_path / "missing", [".pdf"])

    def test_file_instead_of_directory_raises(self, tmp_path: Path) -> None:
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(ConfigurationError):
            discover_documents(f, [".txt"])


class TestLoadDocument:
    def test_markdown(self, docs_dir: Path) -> None:
        doc = load_document(docs_dir / "b_notes.md")
        assert doc.source == "b_notes.md"
        assert doc.format == "markdown"
        assert doc.text == "# Notes\n\nSome notes."
        assert doc.page_count is None
        assert doc.extraction_metadata() == {"format": "markdown"}

    def test_plain_text(self, docs_dir: Path) -> None:
        doc = load_document(docs_dir / "a_readme.TXT")
        assert doc.format == "text"
        assert doc.char_count == len("Read me.")

    def test_pdf_page_count(self, tmp_path: Path) -> None:
        path = tmp_path / "blank.pdf"
        _write_blank_pdf(path, pages=3)
        doc = load_document(path)
        assert doc.format == "pdf"
        assert doc.page_count == 3
        assert doc.extraction_metadata()["total_pages"] == 3

    def test_corrupt_pdf_raises_extraction_error(self, docs_dir: Path) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            load_document(docs_dir / "c_report.pdf")
        assert exc_info.value.source == "c_report.pdf"
        assert exc_info.value.__cause__ is not None

    def test_unsupported_extension_raises(self, docs_dir: Path) -> None:
        with pytest.raises(ExtractionError, match="Unsupported file type"):
            load_document(docs_dir / "image.png")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError):
            load_document(tmp_path / "gone.txt")

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes("café".encode("latin-1"))
        with pytest.raises(ExtractionError):
            load_document(path)
