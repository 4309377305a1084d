"""Pytest fixtures and shared test configuration.

Fixtures:
    - session_store: Fresh in-memory store wired into the app
    - async_client: HTTPX client for API testing
    - make_message: Factory for chat messages
    - stub_config: Provider config with fake credentials

Dependency overrides are cleared after every test.
"""

import uuid
from collections.abc import AsyncGenerator, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from aio_chat.api import app
from aio_chat.config.provider_config import ProviderConfig
from aio_chat.models.schemas import Message, UploadedFile
from aio_chat.services.session_store import SessionStore, get_session_store


@pytest.fixture(autouse=True)
def clear_overrides() -> Generator[None]:
    """Reset FastAPI dependency overrides after each test."""
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def session_store() -> SessionStore:
    """Return an empty session store used by the API for this test."""
    store = SessionStore()
    app.dependency_overrides[get_session_store] = lambda: store
    return store


@pytest.fixture
async def async_client(session_store: SessionStore) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_message() -> Callable[..., Message]:
    """Return a factory building messages with unique ids."""

    def factory(
        content: str,
        role: str = "user",
        files: list[UploadedFile] | None = None,
        message_id: str | None = None,
    ) -> Message:
        return Message(
            id=message_id or uuid.uuid4().hex,
            role=role,
            content=content,
            files=files,
        )

    return factory


@pytest.fixture
def stub_config() -> ProviderConfig:
    """Provider config with fake keys for every cloud provider."""
    return ProviderConfig(
        openai_api_key="sk-test-key",
        openai_base_url=None,
        google_api_key="g-test-key",
        anthropic_api_key="a-test-key",
        ollama_host="http://localhost:11434",
        request_timeout=5,
    )
