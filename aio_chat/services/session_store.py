"""In-memory chat session storage.

Sessions live for the lifetime of the process only. All access happens on
the event loop thread, so plain dict operations are sufficient.
"""

import logging
import random
import string
import time

from aio_chat.models.schemas import ChatSession, Message, SessionRecord, utc_now_iso

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50
DEFAULT_TITLE = "New Chat"

_BASE36 = string.digits + string.ascii_lowercase


class SessionNotFoundError(Exception):
    """Raised when a session id is not in the store."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


def generate_session_id() -> str:
    """Build an id of the form ``session_<epoch ms>_<9 base36 chars>``."""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def generate_title(first_message: str) -> str:
    """Derive a session title from the first message (max 50 chars)."""
    text = first_message.strip()
    title = text[:TITLE_MAX_LENGTH]
    return f"{title}..." if len(title) < len(text) else title


class SessionStore:
    """Process-memory map of session id to session header and messages."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}

    def _require(self, session_id: str) -> SessionRecord:
        try:
            return self._records[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list_sessions(self) -> list[ChatSession]:
        """Return all session headers in creation order."""
        return [record.session for record in self._records.values()]

    def get(self, session_id: str) -> SessionRecord:
        return self._require(session_id)

    def history(self, session_id: str) -> list[Message]:
        return list(self._require(session_id).messages)

    def create(
        self,
        title: str | None = None,
        first_message: str | None = None,
    ) -> ChatSession:
        """Create an empty session.

        Args:
            title: Explicit title. Takes precedence over first_message.
            first_message: Text to derive a title from when no title is given.

        Returns:
            The new session header.
        """
        if title:
            session_title = title
        elif first_message:
            session_title = generate_title(first_message)
        else:
            session_title = DEFAULT_TITLE

        now = utc_now_iso()
        session = ChatSession(
            id=generate_session_id(),
            title=session_title,
            created_at=now,
            updated_at=now,
            message_count=0,
        )
        self._records[session.id] = SessionRecord(session=session, messages=[])
        logger.info(f"Created session {session.id} ({session_title!r})")
        return session

    def add_message(self, session_id: str, message: Message) -> ChatSession:
        """Append a message, or replace an existing one with the same id.

        Replacing a message drops every message after it, so an edited or
        retried user message starts a fresh tail of the conversation.

        Args:
            session_id: Target session.
            message: Message to store.

        Returns:
            The updated session header.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        record = self._require(session_id)
        index = next(
            (i for i, existing in enumerate(record.messages) if existing.id == message.id),
            None,
        )
        if index is None:
            record.messages.append(message)
        else:
            del record.messages[index:]
            record.messages.append(message)

        session = record.session
        session.message_count = len(record.messages)
        session.updated_at = utc_now_iso()

        if len(record.messages) == 1 and message.role == "user":
            session.title = generate_title(message.content)

        return session

    def rename(self, session_id: str, title: str) -> ChatSession:
        session = self._require(session_id).session
        session.title = title
        session.updated_at = utc_now_iso()
        return session

    def delete(self, session_id: str) -> None:
        self._require(session_id)
        del self._records[session_id]
        logger.info(f"Deleted session {session_id}")


# Module-level singleton instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the global session store.

    Returns:
        The SessionStore instance shared by all requests.
    """
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store
