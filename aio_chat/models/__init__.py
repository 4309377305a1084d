"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message / UploadedFile: Conversation entries and their attachments
    - ChatSession / SessionRecord: Stored conversations
    - ChatRequest / ChatResponse / StreamChunk: Chat completion payloads
    - UploadResponse: Document upload result
    - TranslateRequest / TranslateResponse: Translation payloads
    - WebSearchRequest / WebSearchResponse / SearchResult: Search payloads
"""

from aio_chat.models.schemas import (
    ChatRequest,
    ChatResponse,
    ChatSession,
    Message,
    SearchResult,
    SessionRecord,
    StreamChunk,
    StreamStatus,
    UploadedFile,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatSession",
    "Message",
    "SearchResult",
    "SessionRecord",
    "StreamChunk",
    "StreamStatus",
    "UploadedFile",
]
