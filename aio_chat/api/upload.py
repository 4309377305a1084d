"""Document upload endpoint for message attachments.

Handles file upload, validation, text extraction, truncation and optional
translation. The extracted text is returned to the client, which attaches it
to the next message; nothing is stored server side.
"""

import json
import logging

from fastapi import APIRouter, Form, HTTPException, UploadFile, status

from aio_chat.config.app_config import MAX_FILE_SIZE, SettingsConfig, validate_settings
from aio_chat.models.schemas import UploadResponse
from aio_chat.parsing.documents import (
    DocumentParseError,
    UnsupportedFileTypeError,
    extract_text,
    truncate,
)
from aio_chat.services.translation import translate_to_english

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


def _parse_settings(raw: str | None) -> SettingsConfig:
    """Parse the JSON settings form field.

    Raises:
        HTTPException: 400 if the field is not a JSON object.
    """
    if not raw:
        return validate_settings(None)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Settings must be valid JSON",
        ) from e

    if not isinstance(data, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Settings must be a JSON object",
        )
    return validate_settings(data)


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    file: UploadFile,
    settings: str | None = Form(None),
) -> UploadResponse:
    """Upload a document and return its text.

    Accepts plain text, HTML, PDF, DOCX and DOC files. The extracted text is
    cut at the file content limit and, when translation is enabled, passed
    through the translator.

    Args:
        file: The uploaded file (multipart/form-data).
        settings: Optional JSON-encoded user settings.

    Returns:
        UploadResponse with the processed text and file details.

    Raises:
        400: Missing filename, empty or corrupt file, malformed settings.
        413: File exceeds 10MB limit.
        415: Unsupported file type.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    final_settings = _parse_settings(settings)
    content = await _read_and_validate_size(file)

    try:
        document = extract_text(content, file.content_type, file.filename)
    except UnsupportedFileTypeError as e:
        logger.warning(f"Rejected {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(e),
        ) from e
    except DocumentParseError as e:
        logger.warning(f"Parse error for {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    text = truncate(document.text, final_settings.file_content_limit)
    text = translate_to_english(text, final_settings)

    logger.info(f"Processed upload {file.filename} ({len(content)} bytes, {document.mime_type})")
    return UploadResponse(
        success=True,
        content=text,
        original_name=file.filename,
        size=len(content),
        type=document.mime_type,
    )
