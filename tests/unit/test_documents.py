"""Unit tests for document text extraction."""

import io

import pytest
import pytest_check as check
from docx import Document
from pypdf import PdfWriter

from aio_chat.config.app_config import MAX_FILE_SIZE
from aio_chat.parsing.documents import (
    MIME_DOC,
    MIME_DOCX,
    MIME_HTML,
    MIME_PDF,
    MIME_TEXT,
    DocumentParseError,
    UnsupportedFileTypeError,
    extract_text,
    resolve_mime_type,
    truncate,
)


def _docx_bytes() -> bytes:
    doc = Document()
    doc.add_paragraph("Day 1: Arrive in Lisbon")
    doc.add_paragraph("")
    doc.add_paragraph("Day 2: Sintra day trip")
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Hotel"
    table.rows[0].cells[1].text = "Included"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes(pages: int = 1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestTruncate:
    """Tests for content truncation."""

    def test_short_text_unchanged(self) -> None:
        check.equal(truncate("short", 10), "short")

    def test_exact_length_unchanged(self) -> None:
        check.equal(truncate("a" * 10, 10), "a" * 10)

    def test_long_text_cut_with_ellipsis(self) -> None:
        check.equal(truncate("a" * 11, 10), "a" * 10 + "...")


class TestResolveMimeType:
    """Tests for MIME type resolution."""

    def test_strips_parameters(self) -> None:
        """Charset parameters are dropped."""
        check.equal(resolve_mime_type("text/plain; charset=utf-8", "a.txt"), MIME_TEXT)

    def test_guesses_from_extension_for_generic_type(self) -> None:
        """Octet-stream uploads are typed by extension."""
        check.equal(resolve_mime_type("application/octet-stream", "plan.docx"), MIME_DOCX)

    def test_guesses_from_extension_when_missing(self) -> None:
        check.equal(resolve_mime_type(None, "itinerary.PDF"), MIME_PDF)

    def test_reported_type_wins_over_extension(self) -> None:
        """A specific reported type is trusted."""
        check.equal(resolve_mime_type("text/html", "notes.txt"), MIME_HTML)


class TestExtractTextValid:
    """Tests for successful extraction."""

    def test_plain_text(self) -> None:
        """UTF-8 text is decoded."""
        result = extract_text("Día 1: Madrid".encode(), MIME_TEXT)

        check.equal(result.text, "Día 1: Madrid")
        check.equal(result.mime_type, MIME_TEXT)
        check.is_none(result.pages)

    def test_text_with_bom(self) -> None:
        """A UTF-8 byte order mark is dropped."""
        result = extract_text(b"\xef\xbb\xbfhello", MIME_TEXT)

        check.equal(result.text, "hello")

    def test_invalid_utf8_replaced(self) -> None:
        """Undecodable bytes become replacement characters."""
        result = extract_text(b"caf\xe9", MIME_TEXT)

        check.is_in("�", result.text)

    def test_html_returned_as_markup(self) -> None:
        """HTML is decoded without stripping tags."""
        result = extract_text(b"<p>Tour</p>", MIME_HTML)

        check.equal(result.text, "<p>Tour</p>")

    def test_docx_paragraphs_and_tables(self) -> None:
        """DOCX text includes non-empty paragraphs and table cells."""
        result = extract_text(_docx_bytes(), MIME_DOCX)

        check.equal(
            result.text,
            "Day 1: Arrive in Lisbon\nDay 2: Sintra day trip\nHotel\tIncluded",
        )

    def test_pdf_page_count(self) -> None:
        """Blank PDFs parse with their page count and no text."""
        result = extract_text(_blank_pdf_bytes(pages=2), MIME_PDF)

        check.equal(result.pages, 2)
        check.equal(result.text.strip(), "")

    def test_generic_type_uses_filename(self) -> None:
        """Files sent as octet-stream are parsed by extension."""
        result = extract_text(_docx_bytes(), "application/octet-stream", "plan.docx")

        check.equal(result.mime_type, MIME_DOCX)
        check.is_in("Lisbon", result.text)

    def test_legacy_doc_decoded_as_text(self) -> None:
        """.doc files have no parser and are decoded best effort."""
        result = extract_text(b"Itinerary\r\nDay 1", "application/octet-stream", "old.doc")

        check.equal(result.mime_type, MIME_DOC)
        check.equal(result.text, "Itinerary\r\nDay 1")
        check.is_none(result.pages)


class TestExtractTextRejection:
    """Tests for validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(DocumentParseError, match="Empty file"):
            extract_text(b"", MIME_TEXT)

    def test_rejects_oversized_file(self) -> None:
        """Files over 10MB are rejected."""
        with pytest.raises(DocumentParseError, match="exceeds maximum"):
            extract_text(b"a" * (MAX_FILE_SIZE + 1), MIME_TEXT)

    def test_rejects_unsupported_type(self) -> None:
        """Types without an extractor raise UnsupportedFileTypeError."""
        with pytest.raises(UnsupportedFileTypeError, match="image/png"):
            extract_text(b"\x89PNG", "image/png", "photo.png")

    def test_unsupported_checked_before_size(self) -> None:
        """An unsupported empty file reports its type, not its size."""
        with pytest.raises(UnsupportedFileTypeError):
            extract_text(b"", "application/zip")

    def test_rejects_non_pdf_bytes(self) -> None:
        with pytest.raises(DocumentParseError, match="Invalid PDF"):
            extract_text(b"not a pdf at all", MIME_PDF)

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(DocumentParseError, match="Corrupt|Failed|no pages"):
            extract_text(b"%PDF-1.4\n1 0 obj\n<<", MIME_PDF)

    def test_rejects_corrupt_docx(self) -> None:
        with pytest.raises(DocumentParseError, match="Corrupt or invalid DOCX"):
            extract_text(b"not a zip archive", MIME_DOCX)
