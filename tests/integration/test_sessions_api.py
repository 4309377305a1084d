"""Integration tests for the chat session endpoints."""

import pytest_check as check
from httpx import AsyncClient

from aio_chat.models.schemas import SessionListResponse, SessionRecord, SessionResponse
from aio_chat.services.session_store import SessionStore

URL = "/api/chat-sessions"


def _message(message_id: str, content: str, role: str = "user") -> dict[str, str]:
    return {
        "id": message_id,
        "role": role,
        "content": content,
        "timestamp": "2024-05-01T09:30:00Z",
    }


class TestCreateAndList:
    """Tests for POST and GET without a session id."""

    async def test_create_without_body(self, async_client: AsyncClient) -> None:
        """Posting with no body creates a New Chat session."""
        response = await async_client.post(URL)

        check.equal(response.status_code, 201)
        session = SessionResponse.model_validate(response.json()).session
        check.equal(session.title, "New Chat")
        check.is_true(session.id.startswith("session_"))

    async def test_create_with_first_message(self, async_client: AsyncClient) -> None:
        response = await async_client.post(URL, json={"firstMessage": "x" * 60})

        check.equal(response.json()["session"]["title"], "x" * 50 + "...")

    async def test_wire_format_is_camel_case(self, async_client: AsyncClient) -> None:
        response = await async_client.post(URL, json={"title": "Trip"})

        session = response.json()["session"]
        check.is_in("createdAt", session)
        check.is_in("updatedAt", session)
        check.equal(session["messageCount"], 0)

    async def test_list_sessions(self, async_client: AsyncClient) -> None:
        await async_client.post(URL, json={"title": "One"})
        await async_client.post(URL, json={"title": "Two"})

        response = await async_client.get(URL)

        check.equal(response.status_code, 200)
        sessions = SessionListResponse.model_validate(response.json()).sessions
        check.equal([s.title for s in sessions], ["One", "Two"])


class TestGetSession:
    """Tests for GET with a session id."""

    async def test_get_with_messages(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        session = session_store.create()
        await async_client.put(
            URL, json={"sessionId": session.id, "message": _message("m1", "Hello")}
        )

        response = await async_client.get(URL, params={"sessionId": session.id})

        check.equal(response.status_code, 200)
        record = SessionRecord.model_validate(response.json())
        check.equal(record.session.id, session.id)
        check.equal([m.content for m in record.messages], ["Hello"])

    async def test_get_unknown_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.get(URL, params={"sessionId": "nope"})

        check.equal(response.status_code, 404)
        check.equal(response.json()["detail"], "Session not found")


class TestUpdateSession:
    """Tests for PUT and PATCH."""

    async def test_put_message_sets_title_and_count(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        session = session_store.create()

        response = await async_client.put(
            URL,
            json={"sessionId": session.id, "message": _message("m1", "Weekend in Porto")},
        )

        check.equal(response.status_code, 200)
        body = response.json()["session"]
        check.equal(body["title"], "Weekend in Porto")
        check.equal(body["messageCount"], 1)

    async def test_put_existing_id_replaces_tail(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        """Re-sending a message id drops the messages after it."""
        session = session_store.create()
        for message in (
            _message("m1", "Question"),
            _message("m2", "Answer", role="assistant"),
        ):
            await async_client.put(URL, json={"sessionId": session.id, "message": message})

        response = await async_client.put(
            URL, json={"sessionId": session.id, "message": _message("m1", "Edited")}
        )

        check.equal(response.json()["session"]["messageCount"], 1)
        check.equal([m.content for m in session_store.history(session.id)], ["Edited"])

    async def test_put_new_title(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        session = session_store.create()

        response = await async_client.put(
            URL, json={"sessionId": session.id, "newTitle": "Renamed"}
        )

        check.equal(response.json()["session"]["title"], "Renamed")

    async def test_put_unknown_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.put(
            URL, json={"sessionId": "nope", "message": _message("m1", "hi")}
        )

        check.equal(response.status_code, 404)

    async def test_patch_renames(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        session = session_store.create()

        response = await async_client.patch(
            URL, json={"sessionId": session.id, "title": "  Japan 2025  "}
        )

        check.equal(response.status_code, 200)
        check.equal(response.json()["session"]["title"], "Japan 2025")

    async def test_patch_blank_title_rejected(
        self, async_client: AsyncClient, session_store: SessionStore
    ) -> None:
        session = session_store.create()

        response = await async_client.patch(URL, json={"sessionId": session.id, "title": "  "})

        check.equal(response.status_code, 422)

    async def test_patch_unknown_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.patch(URL, json={"sessionId": "nope", "title": "x"})

        check.equal(response.status_code, 404)


class TestDeleteSession:
    """Tests for DELETE."""

    async def test_delete(self, async_client: AsyncClient, session_store: SessionStore) -> None:
        session = session_store.create()

        response = await async_client.delete(URL, params={"sessionId": session.id})

        check.equal(response.status_code, 200)
        check.equal(response.json()["message"], "Session deleted successfully")
        check.equal(session_store.list_sessions(), [])

    async def test_delete_unknown_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.delete(URL, params={"sessionId": "nope"})

        check.equal(response.status_code, 404)

    async def test_delete_without_id_returns_404(self, async_client: AsyncClient) -> None:
        response = await async_client.delete(URL)

        check.equal(response.status_code, 404)
