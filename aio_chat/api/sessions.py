"""Chat session endpoints backed by the in-memory session store."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from aio_chat.models.schemas import (
    CreateSessionRequest,
    DeleteSessionResponse,
    RenameSessionRequest,
    SessionListResponse,
    SessionRecord,
    SessionResponse,
    UpdateSessionRequest,
)
from aio_chat.services.session_store import (
    SessionNotFoundError,
    SessionStore,
    get_session_store,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat-sessions", tags=["sessions"])

SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
SessionIdQuery = Annotated[str | None, Query(alias="sessionId")]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


@router.get("", response_model=SessionRecord | SessionListResponse)
async def get_sessions(
    store: SessionStoreDep,
    session_id: SessionIdQuery = None,
) -> SessionRecord | SessionListResponse:
    """List all sessions, or return one session with its messages.

    Args:
        session_id: When given, return that session and its messages.

    Raises:
        404: Session not found.
    """
    if session_id:
        try:
            return store.get(session_id)
        except SessionNotFoundError as e:
            raise _not_found() from e

    return SessionListResponse(sessions=store.list_sessions())


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    store: SessionStoreDep,
    request: CreateSessionRequest | None = None,
) -> SessionResponse:
    """Create an empty session titled from the request (default "New Chat")."""
    request = request or CreateSessionRequest()
    session = store.create(title=request.title, first_message=request.first_message)
    return SessionResponse(session=session)


@router.put("", response_model=SessionResponse)
async def update_session(
    request: UpdateSessionRequest,
    store: SessionStoreDep,
) -> SessionResponse:
    """Add a message to a session and/or change its title.

    A message whose id already exists replaces it and drops the messages that
    followed, which is how edits and retries are recorded.

    Raises:
        404: Session not found.
    """
    try:
        session = store.get(request.session_id).session
        if request.message:
            session = store.add_message(request.session_id, request.message)
        if request.new_title:
            session = store.rename(request.session_id, request.new_title)
    except SessionNotFoundError as e:
        raise _not_found() from e

    return SessionResponse(session=session)


@router.patch("", response_model=SessionResponse)
async def rename_session(
    request: RenameSessionRequest,
    store: SessionStoreDep,
) -> SessionResponse:
    """Rename a session.

    Raises:
        404: Session not found.
    """
    try:
        session = store.rename(request.session_id, request.title)
    except SessionNotFoundError as e:
        raise _not_found() from e

    logger.info(f"Renamed session {request.session_id} to {request.title!r}")
    return SessionResponse(session=session)


@router.delete("", response_model=DeleteSessionResponse)
async def delete_session(
    store: SessionStoreDep,
    session_id: SessionIdQuery = None,
) -> DeleteSessionResponse:
    """Delete a session and its messages.

    Raises:
        404: Session id missing or not found.
    """
    if not session_id:
        raise _not_found()
    try:
        store.delete(session_id)
    except SessionNotFoundError as e:
        raise _not_found() from e

    return DeleteSessionResponse(message="Session deleted successfully")
