"""Text extraction for uploaded documents.

Dispatches on MIME type: plain text and HTML are decoded directly, PDFs go
through pypdf, DOCX through python-docx. Legacy .doc files have no parser and
are decoded as text on a best-effort basis.
"""

import io
import logging
import mimetypes
import zipfile
from pathlib import Path

from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError
from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from aio_chat.config.app_config import MAX_FILE_SIZE

logger = logging.getLogger(__name__)

PDF_MAGIC_BYTES = b"%PDF"

MIME_TEXT = "text/plain"
MIME_HTML = "text/html"
MIME_PDF = "application/pdf"
MIME_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_DOC = "application/msword"

SUPPORTED_MIME_TYPES = (MIME_TEXT, MIME_HTML, MIME_PDF, MIME_DOCX, MIME_DOC)

# Browsers send these when they cannot tell what a file is
_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

_EXTENSION_MIME_TYPES = {
    ".txt": MIME_TEXT,
    ".html": MIME_HTML,
    ".htm": MIME_HTML,
    ".pdf": MIME_PDF,
    ".docx": MIME_DOCX,
    ".doc": MIME_DOC,
}


class ExtractedDocument(BaseModel):
    """Text extracted from an uploaded file.

    Attributes:
        text: Combined text content.
        mime_type: MIME type the file was parsed as.
        pages: Page count for paginated formats, otherwise None.
    """

    text: str
    mime_type: str
    pages: int | None = Field(default=None, ge=0)


class DocumentParseError(Exception):
    """Raised when a document is empty, too large, or cannot be read."""

    pass


class UnsupportedFileTypeError(DocumentParseError):
    """Raised when no extractor exists for the file's MIME type."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(f"Unsupported file type: {mime_type or 'unknown'}")
        self.mime_type = mime_type


def truncate(text: str, limit: int) -> str:
    """Cut text at limit characters, marking the cut with an ellipsis."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def resolve_mime_type(mime_type: str | None, filename: str | None) -> str:
    """Return the effective MIME type, guessing from the filename if needed.

    Args:
        mime_type: Type reported by the client (may be empty or generic).
        filename: Original filename used for extension lookup.

    Returns:
        Normalised MIME type without parameters (e.g. charset).
    """
    reported = (mime_type or "").split(";")[0].strip().lower()
    if reported not in _GENERIC_MIME_TYPES:
        return reported

    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix in _EXTENSION_MIME_TYPES:
            return _EXTENSION_MIME_TYPES[suffix]
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed

    return reported


def _validate_bytes(content: bytes) -> None:
    if not content:
        raise DocumentParseError("Empty file provided")

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise DocumentParseError(
            f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)"
        )


def _decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("File is not valid UTF-8, decoding with replacement characters")
        return content.decode("utf-8", errors="replace")


def _extract_pdf(content: bytes) -> tuple[str, int]:
    if not content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise DocumentParseError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise DocumentParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise DocumentParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise DocumentParseError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            page_text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            continue
        if page_text:
            text_parts.append(page_text)

    text = "\n\n".join(text_parts)
    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")

    return text, pages


def _extract_docx(content: bytes) -> str:
    try:
        doc = DocxDocument(io.BytesIO(content))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise DocumentParseError(f"Corrupt or invalid DOCX: {e}") from e

    parts: list[str] = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append("\t".join(cells))
    return "\n".join(parts)


def extract_text(
    content: bytes,
    mime_type: str | None,
    filename: str | None = None,
) -> ExtractedDocument:
    """Extract the text content of an uploaded file.

    Args:
        content: Raw file bytes.
        mime_type: MIME type reported by the client.
        filename: Original filename, used when the MIME type is generic.

    Returns:
        ExtractedDocument with the text and the MIME type it was parsed as.

    Raises:
        UnsupportedFileTypeError: If the type has no extractor.
        DocumentParseError: If the file is empty, too large, or corrupt.
    """
    resolved = resolve_mime_type(mime_type, filename)
    if resolved not in SUPPORTED_MIME_TYPES:
        raise UnsupportedFileTypeError(resolved)

    _validate_bytes(content)

    if resolved == MIME_PDF:
        text, pages = _extract_pdf(content)
        return ExtractedDocument(text=text, mime_type=resolved, pages=pages)

    if resolved == MIME_DOCX:
        text = _extract_docx(content)
    else:
        text = _decode_text(content)

    return ExtractedDocument(text=text, mime_type=resolved)
