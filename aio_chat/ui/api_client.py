"""HTTP client the UI uses to reach the chat API."""

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from aio_chat.config.app_config import SettingsConfig
from aio_chat.config.server_config import get_server_config
from aio_chat.models.schemas import (
    ChatSession,
    Message,
    ModelsResponse,
    SessionRecord,
    UploadedFile,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the API answers with an error or cannot be reached."""

    pass


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, str):
        return detail
    return f"HTTP {response.status_code}"


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class ApiClient:
    """Thin async wrapper over the chat API endpoints.

    Args:
        base_url: API root URL. Defaults to the configured ``api_base_url``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests pass an ASGITransport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None:
            base_url = get_server_config().api_base_url
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        async with self._client() as client:
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                raise ApiError(f"Connection failed: {e}") from e
        if response.is_error:
            raise ApiError(_error_detail(response))
        return response.json()

    async def get_catalog(self) -> ModelsResponse:
        data = await self._request("GET", "/api/models")
        return ModelsResponse.model_validate(data)

    async def list_sessions(self) -> list[ChatSession]:
        data = await self._request("GET", "/api/chat-sessions")
        return [ChatSession.model_validate(s) for s in data.get("sessions", [])]

    async def get_session(self, session_id: str) -> SessionRecord:
        data = await self._request(
            "GET", "/api/chat-sessions", params={"sessionId": session_id}
        )
        return SessionRecord.model_validate(data)

    async def create_session(
        self,
        title: str | None = None,
        first_message: str | None = None,
    ) -> ChatSession:
        payload = {"title": title, "firstMessage": first_message}
        data = await self._request(
            "POST",
            "/api/chat-sessions",
            json={k: v for k, v in payload.items() if v is not None},
        )
        return ChatSession.model_validate(data["session"])

    async def save_message(self, session_id: str, message: Message) -> ChatSession:
        data = await self._request(
            "PUT",
            "/api/chat-sessions",
            json={"sessionId": session_id, "message": _dump(message)},
        )
        return ChatSession.model_validate(data["session"])

    async def rename_session(self, session_id: str, title: str) -> ChatSession:
        data = await self._request(
            "PATCH",
            "/api/chat-sessions",
            json={"sessionId": session_id, "title": title},
        )
        return ChatSession.model_validate(data["session"])

    async def delete_session(self, session_id: str) -> None:
        await self._request(
            "DELETE", "/api/chat-sessions", params={"sessionId": session_id}
        )

    async def upload(
        self,
        filename: str,
        content: bytes,
        content_type: str,
        settings: SettingsConfig,
    ) -> UploadedFile:
        """Upload a file and return it as an attachment carrying its text."""
        data = await self._request(
            "POST",
            "/api/upload",
            files={"file": (filename, content, content_type)},
            data={"settings": settings.model_dump_json(by_alias=True)},
        )
        return UploadedFile(
            name=filename,
            type=data.get("type", content_type),
            size=data.get("size", len(content)),
            content=data.get("content"),
        )

    def _chat_payload(
        self,
        messages: list[Message],
        model: str,
        session_id: str | None,
        settings: SettingsConfig,
    ) -> dict[str, Any]:
        return {
            "messages": [_dump(m) for m in messages],
            "model": model,
            "sessionId": session_id,
            "settings": _dump(settings),
        }

    async def chat(
        self,
        messages: list[Message],
        model: str,
        session_id: str | None,
        settings: SettingsConfig,
    ) -> str:
        data = await self._request(
            "POST",
            "/api/chat",
            json=self._chat_payload(messages, model, session_id, settings),
        )
        return data["content"]

    async def stream_chat(
        self,
        messages: list[Message],
        model: str,
        session_id: str | None,
        settings: SettingsConfig,
        on_chunk: Callable[[str], None],
        on_status: Callable[[str], None],
        on_complete: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Consume the SSE stream from /api/chat/stream."""
        async with self._client() as client:
            try:
                async with client.stream(
                    "POST",
                    "/api/chat/stream",
                    json=self._chat_payload(messages, model, session_id, settings),
                    headers={"Accept": "text/event-stream"},
                ) as response:
                    if response.is_error:
                        await response.aread()
                        on_error(_error_detail(response))
                        return
                    async for line in response.aiter_lines():
                        if not line.startswith("data: "):
                            continue
                        try:
                            data = json.loads(line[6:])
                        except json.JSONDecodeError:
                            data = None
                        if not isinstance(data, dict):
                            logger.error(f"Malformed stream data: {line!r}")
                            on_error("Malformed stream data")
                            return
                        if data.get("error"):
                            on_error(data["error"])
                            return
                        if data.get("done"):
                            on_complete()
                            return
                        if status := data.get("status"):
                            on_status(status)
                        if content := data.get("content"):
                            on_chunk(content)
            except httpx.RequestError as e:
                on_error(f"Connection failed: {e}")
