"""Integration tests for the UI's ApiClient against the ASGI app."""

from collections.abc import Callable
from unittest.mock import MagicMock

import httpx
import pytest
import pytest_check as check

from aio_chat.api import app
from aio_chat.config.app_config import SettingsConfig
from aio_chat.config.provider_config import ProviderConfig
from aio_chat.models.schemas import Message
from aio_chat.providers.chat_service import ChatService, get_chat_service
from aio_chat.services.session_store import SessionStore
from aio_chat.ui.api_client import ApiClient, ApiError


@pytest.fixture
def api(session_store: SessionStore) -> ApiClient:
    return ApiClient(base_url="http://test", transport=httpx.ASGITransport(app=app))


@pytest.fixture
def offline_service(session_store: SessionStore) -> ChatService:
    """Chat service whose cloud providers have no credentials."""
    service = ChatService(
        config=ProviderConfig(openai_api_key="", google_api_key="", anthropic_api_key=""),
        session_store=session_store,
        web_search=MagicMock(),
    )
    app.dependency_overrides[get_chat_service] = lambda: service
    return service


class TestSessions:
    """Tests for session calls through the client."""

    async def test_session_lifecycle(
        self, api: ApiClient, make_message: Callable[..., Message]
    ) -> None:
        session = await api.create_session(title="New Chat")
        await api.save_message(session.id, make_message("Three days in Kyoto"))
        renamed = await api.rename_session(session.id, "Kyoto")

        record = await api.get_session(session.id)
        sessions = await api.list_sessions()
        await api.delete_session(session.id)

        check.equal(renamed.title, "Kyoto")
        check.equal(record.messages[0].content, "Three days in Kyoto")
        check.equal([s.id for s in sessions], [session.id])
        check.equal(await api.list_sessions(), [])

    async def test_missing_session_raises_api_error(self, api: ApiClient) -> None:
        with pytest.raises(ApiError, match="Session not found"):
            await api.get_session("nope")


class TestCatalogAndUpload:
    """Tests for catalog and upload calls."""

    async def test_get_catalog(self, api: ApiClient) -> None:
        catalog = await api.get_catalog()

        check.greater(len(catalog.models), 0)

    async def test_upload_returns_attachment(self, api: ApiClient) -> None:
        attachment = await api.upload(
            "notes.txt", b"Day 1: Kyoto", "text/plain", SettingsConfig()
        )

        check.equal(attachment.name, "notes.txt")
        check.equal(attachment.content, "Day 1: Kyoto")
        check.equal(attachment.size, 12)

    async def test_upload_error_raises(self, api: ApiClient) -> None:
        with pytest.raises(ApiError, match="Unsupported file type"):
            await api.upload("a.png", b"\x89PNG", "image/png", SettingsConfig())


class TestChat:
    """Tests for chat calls through the client."""

    async def test_chat_returns_mock_for_unconfigured_claude(
        self,
        api: ApiClient,
        offline_service: ChatService,
        make_message: Callable[..., Message],
    ) -> None:
        reply = await api.chat(
            [make_message("hi")], "claude-3-haiku-20240307", None, SettingsConfig()
        )

        check.is_true(reply.startswith("[Claude 3 Response]"))

    async def test_stream_chat_callbacks(
        self,
        api: ApiClient,
        offline_service: ChatService,
        make_message: Callable[..., Message],
    ) -> None:
        chunks: list[str] = []
        statuses: list[str] = []
        completed: list[bool] = []
        errors: list[str] = []

        await api.stream_chat(
            [make_message("hi")],
            "gemini-pro",
            None,
            SettingsConfig(),
            chunks.append,
            statuses.append,
            lambda: completed.append(True),
            errors.append,
        )

        check.equal(statuses, ["received", "generating"])
        check.equal(len(chunks), 1)
        check.is_true(chunks[0].startswith("[Gemini Pro Response]"))
        check.equal(completed, [True])
        check.equal(errors, [])

    async def test_stream_chat_reports_error(
        self,
        api: ApiClient,
        offline_service: ChatService,
        make_message: Callable[..., Message],
    ) -> None:
        """An OpenAI model without a key ends the stream with an error."""
        errors: list[str] = []
        completed: list[bool] = []

        await api.stream_chat(
            [make_message("hi")],
            "gpt-4",
            None,
            SettingsConfig(),
            lambda content: None,
            lambda status: None,
            lambda: completed.append(True),
            errors.append,
        )

        check.equal(len(errors), 1)
        check.is_in("OPENAI_API_KEY", errors[0])
        check.equal(completed, [])

    async def test_stream_unknown_model_reports_error(
        self,
        api: ApiClient,
        offline_service: ChatService,
        make_message: Callable[..., Message],
    ) -> None:
        errors: list[str] = []

        await api.stream_chat(
            [make_message("hi")],
            "gpt-99",
            None,
            SettingsConfig(),
            lambda content: None,
            lambda status: None,
            lambda: None,
            errors.append,
        )

        check.equal(errors, ["Unsupported model"])

    async def test_connection_failure_reports_error(
        self, make_message: Callable[..., Message]
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        api = ApiClient(base_url="http://test", transport=httpx.MockTransport(refuse))
        errors: list[str] = []

        await api.stream_chat(
            [make_message("hi")],
            "gpt-4",
            None,
            SettingsConfig(),
            lambda content: None,
            lambda status: None,
            lambda: None,
            errors.append,
        )

        check.equal(len(errors), 1)
        check.is_true(errors[0].startswith("Connection failed"))

    @pytest.mark.parametrize(
        "body",
        [
            'data: {"content": "hi"\n\n',
            'data: ["not", "an", "object"]\n\n',
        ],
    )
    async def test_malformed_stream_line_reports_error(
        self, body: str, make_message: Callable[..., Message]
    ) -> None:
        def reply(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, text=body, headers={"content-type": "text/event-stream"}
            )

        api = ApiClient(base_url="http://test", transport=httpx.MockTransport(reply))
        chunks: list[str] = []
        errors: list[str] = []

        await api.stream_chat(
            [make_message("hi")],
            "gpt-4",
            None,
            SettingsConfig(),
            chunks.append,
            lambda status: None,
            lambda: None,
            errors.append,
        )

        check.equal(errors, ["Malformed stream data"])
        check.equal(chunks, [])
