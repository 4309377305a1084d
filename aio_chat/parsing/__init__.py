"""Document parsing utilities for uploaded attachments.

Responsibilities:
    - MIME type resolution (client-reported, falling back to file extension)
    - Text extraction for plain text, HTML, PDF (pypdf) and DOCX (python-docx)
    - Size and integrity validation
    - Truncation to the user's content limit
"""

from aio_chat.parsing.documents import (
    DocumentParseError,
    ExtractedDocument,
    UnsupportedFileTypeError,
    extract_text,
    truncate,
)

__all__ = [
    "DocumentParseError",
    "ExtractedDocument",
    "UnsupportedFileTypeError",
    "extract_text",
    "truncate",
]
