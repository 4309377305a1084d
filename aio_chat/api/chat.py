"""Chat completion endpoints and model catalog.

Routes the conversation to the selected provider and returns the reply either
as a single JSON document or as Server-Sent Events.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from aio_chat.config.app_config import (
    DEFAULT_SETTINGS,
    PREDEFINED_PROMPTS,
    get_all_models,
    validate_settings,
)
from aio_chat.models.schemas import (
    ChatRequest,
    ChatResponse,
    ModelsResponse,
    StreamChunk,
    StreamStatus,
)
from aio_chat.providers.chat_service import (
    ChatService,
    ProviderError,
    UnsupportedModelError,
    get_chat_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]


def _sse(chunk: StreamChunk) -> str:
    """Encode a chunk as one Server-Sent Events data frame."""
    return f"data: {chunk.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


@router.get("/models", response_model=ModelsResponse)
async def list_models() -> ModelsResponse:
    """List selectable models, predefined prompts and default settings."""
    return ModelsResponse(
        models=get_all_models(),
        predefined_prompts=PREDEFINED_PROMPTS,
        default_settings=DEFAULT_SETTINGS,
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, service: ChatServiceDep) -> ChatResponse:
    """Get a complete reply from the selected model.

    Args:
        request: Conversation, model id, optional session and settings.

    Returns:
        ChatResponse with the reply text, model id and timestamp.

    Raises:
        400: Model id not in the catalog.
        422: Missing or empty messages.
        500: Provider call failed.
    """
    try:
        content = await service.complete(
            request.messages,
            request.model,
            session_id=request.session_id,
            settings=request.settings,
        )
    except UnsupportedModelError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported model",
        ) from e
    except ProviderError as e:
        logger.error(f"Failed to process chat request for {request.model}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process chat request",
        ) from e

    return ChatResponse(content=content, model=request.model)


@router.post("/chat/stream")
async def chat_stream(request: ChatRequest, service: ChatServiceDep) -> StreamingResponse:
    """Stream the reply from the selected model as Server-Sent Events.

    Each event carries a StreamChunk. Status-only chunks report progress
    (received, searching, generating); the last chunk has ``done=true`` and
    either status ``complete`` or an ``error`` message.

    Raises:
        400: Model id not in the catalog (checked before the stream opens).
        422: Missing or empty messages.
    """
    try:
        service.resolve_model(request.model)
    except UnsupportedModelError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported model",
        ) from e

    async def event_stream() -> AsyncGenerator[str]:
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.RECEIVED))
        try:
            if validate_settings(request.settings).enable_web_search:
                yield _sse(StreamChunk(content="", done=False, status=StreamStatus.SEARCHING))

            turn = await service.prepare(
                request.messages,
                request.model,
                session_id=request.session_id,
                settings=request.settings,
            )
            yield _sse(StreamChunk(content="", done=False, status=StreamStatus.GENERATING))

            async for text in service.stream(turn):
                yield _sse(StreamChunk(content=text, done=False))
        except ProviderError as e:
            logger.error(f"Chat stream error: {e}")
            yield _sse(
                StreamChunk(content="", done=True, status=StreamStatus.ERROR, error=str(e))
            )
            return

        yield _sse(StreamChunk(content="", done=True, status=StreamStatus.COMPLETE))

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
