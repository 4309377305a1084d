"""Backend services used by the API and the chat dispatcher.

Responsibilities:
    - session_store: In-memory chat sessions and their messages
    - translation: Language sniffing and phrase-table translation
    - web_search: DuckDuckGo Instant Answer lookups with placeholder fallback
"""

from aio_chat.services.session_store import (
    SessionNotFoundError,
    SessionStore,
    get_session_store,
)
from aio_chat.services.translation import detect_language, translate_text
from aio_chat.services.web_search import WebSearchClient, get_web_search_client

__all__ = [
    "SessionNotFoundError",
    "SessionStore",
    "WebSearchClient",
    "detect_language",
    "get_session_store",
    "get_web_search_client",
    "translate_text",
]
