"""Pydantic models for API requests and responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import Field, field_validator

from aio_chat.config.app_config import (
    WEB_SEARCH_RESULTS_MAX,
    WEB_SEARCH_RESULTS_MIN,
    CamelModel,
    ModelInfo,
    SettingsConfig,
)


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    SEARCHING = "searching"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


class UploadedFile(CamelModel):
    """A document attached to a message.

    Attributes:
        name: Original filename.
        type: MIME type reported at upload.
        size: Size in bytes.
        content: Extracted (and possibly translated) text.
    """

    name: str
    type: str = ""
    size: int = Field(default=0, ge=0)
    content: str | None = None


class Message(CamelModel):
    """A single chat message in the conversation."""

    id: str
    role: Literal["user", "assistant"]
    content: str = ""
    timestamp: datetime = Field(default_factory=utc_now)
    files: list[UploadedFile] | None = None


class ChatSession(CamelModel):
    """Header of a stored conversation, without its messages."""

    id: str
    title: str
    created_at: str
    updated_at: str
    message_count: int = Field(default=0, ge=0)


class SessionRecord(CamelModel):
    """A stored conversation with its ordered messages."""

    session: ChatSession
    messages: list[Message] = Field(default_factory=list)


class ChatRequest(CamelModel):
    """Request payload for chat completion endpoints.

    Attributes:
        messages: Conversation so far, ending with the new user message.
        model: Catalog model id.
        session_id: Stored session whose history replaces all but the last message.
        settings: Loosely shaped user settings, normalised server side.
    """

    messages: list[Message] = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    session_id: str | None = None
    settings: dict[str, Any] | None = None


class ChatResponse(CamelModel):
    """Complete assistant reply."""

    content: str
    model: str
    timestamp: str = Field(default_factory=utc_now_iso)


class StreamChunk(CamelModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status.
        error: Error message if something went wrong.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    error: str | None = None


class ModelsResponse(CamelModel):
    """Everything the UI needs to render the model picker and settings form."""

    models: list[ModelInfo]
    predefined_prompts: list[str]
    default_settings: SettingsConfig


class CreateSessionRequest(CamelModel):
    title: str | None = None
    first_message: str | None = None


class UpdateSessionRequest(CamelModel):
    """Append (or replace) a message and/or set a new title."""

    session_id: str = Field(..., min_length=1)
    message: Message | None = None
    new_title: str | None = None


class RenameSessionRequest(CamelModel):
    session_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str) -> str:
        """Strip whitespace from title before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class SessionResponse(CamelModel):
    session: ChatSession


class SessionListResponse(CamelModel):
    sessions: list[ChatSession]


class DeleteSessionResponse(CamelModel):
    message: str


class UploadResponse(CamelModel):
    """Response after document upload processing.

    Attributes:
        success: Whether the upload was processed.
        content: Extracted text, truncated and possibly translated.
        original_name: Name of the uploaded file.
        size: Size of the uploaded file in bytes.
        type: Resolved MIME type.
    """

    success: bool
    content: str
    original_name: str
    size: int
    type: str


class TranslateRequest(CamelModel):
    text: str = Field(..., min_length=1)
    target_language: str = "en"


class TranslateResponse(CamelModel):
    original_text: str
    translated_text: str
    detected_language: str
    target_language: str


class SearchResult(CamelModel):
    title: str
    url: str
    snippet: str


class WebSearchRequest(CamelModel):
    """Search query and requested result count (clamped to 1..10)."""

    query: str = Field(..., min_length=1)
    limit: int = 5

    @field_validator("query", mode="before")
    @classmethod
    def strip_query(cls, v: str) -> str:
        """Strip whitespace from query before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return max(WEB_SEARCH_RESULTS_MIN, min(v, WEB_SEARCH_RESULTS_MAX))


class WebSearchResponse(CamelModel):
    results: list[SearchResult]
    query: str
