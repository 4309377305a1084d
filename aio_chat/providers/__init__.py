"""LLM provider routing.

Responsibilities:
    - Model catalog lookup and provider selection
    - Conversation assembly from session history and the new request
    - Inlining of attached file contents and web search results
    - Agno model construction for OpenAI, Gemini, Claude and Ollama
    - Canned replies when a provider cannot be used
"""

from aio_chat.providers.chat_service import (
    ChatService,
    ChatTurn,
    ProviderError,
    ProviderUnavailableError,
    UnsupportedModelError,
    get_chat_service,
)

__all__ = [
    "ChatService",
    "ChatTurn",
    "ProviderError",
    "ProviderUnavailableError",
    "UnsupportedModelError",
    "get_chat_service",
]
