"""Chat dispatch to OpenAI, Gemini, Claude and Ollama through Agno.

Every provider is driven the same way: the catalog entry picks an Agno model
class, the conversation is rendered into Agno messages, and a throwaway
Agent runs them. Sessions are kept by our own store, so the Agent carries no
storage of its own and receives the full history on every call.

Providers fail differently on purpose:

- OpenAI errors (including a missing key) surface as ``ProviderError``.
- Gemini and Claude without credentials answer with a canned reply.
- Ollama answers with a canned reply whenever the local server cannot be used.
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Any

from agno.agent import Agent
from agno.models.anthropic import Claude
from agno.models.google import Gemini
from agno.models.message import Message as AgnoMessage
from agno.models.ollama import Ollama
from agno.models.openai import OpenAIChat

from aio_chat.config.app_config import (
    ModelInfo,
    Provider,
    SettingsConfig,
    find_model,
    validate_settings,
)
from aio_chat.config.provider_config import ProviderConfig, get_provider_config
from aio_chat.models.schemas import Message
from aio_chat.providers.prompting import build_prompt, mock_reply
from aio_chat.services.session_store import (
    SessionNotFoundError,
    SessionStore,
    get_session_store,
)
from aio_chat.services.web_search import (
    WebSearchClient,
    format_search_results,
    get_web_search_client,
)

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response generated"

# Agno event name carrying streamed tokens
_CONTENT_EVENT = "RunContent"
_ERROR_EVENT = "RunError"


class UnsupportedModelError(Exception):
    """Raised when a model id is not in the catalog."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unsupported model: {model_id}")
        self.model_id = model_id


class ProviderError(Exception):
    """Raised when a provider call fails and no fallback applies."""

    pass


class ProviderUnavailableError(ProviderError):
    """Raised when a provider has no credentials configured."""

    pass


@dataclass
class ChatTurn:
    """Everything needed to run one model call.

    Attributes:
        model: Catalog entry of the selected model.
        settings: Normalised user settings.
        history: Conversation, ending with the newest message.
        prompt: History rendered into provider messages.
    """

    model: ModelInfo
    settings: SettingsConfig
    history: list[Message]
    prompt: list[AgnoMessage]

    @property
    def last_message(self) -> Message:
        return self.history[-1]


class ChatService:
    """Routes chat requests to the provider that serves the selected model."""

    def __init__(
        self,
        config: ProviderConfig | None = None,
        session_store: SessionStore | None = None,
        web_search: WebSearchClient | None = None,
    ) -> None:
        """Initialize the chat service.

        Args:
            config: Provider credentials. Loads from environment if not provided.
            session_store: Store used to look up session history.
            web_search: Client used when web search is enabled.
        """
        self._config = config or get_provider_config()
        self._sessions = session_store or get_session_store()
        self._web_search = web_search or get_web_search_client()

    def resolve_model(self, model_id: str) -> ModelInfo:
        model = find_model(model_id)
        if model is None:
            raise UnsupportedModelError(model_id)
        return model

    def resolve_history(
        self,
        messages: list[Message],
        session_id: str | None,
    ) -> list[Message]:
        """Build the conversation sent to the model.

        With a known session the stored history is authoritative and only the
        newest request message is appended to it. Unknown sessions fall back
        to the messages in the request.
        """
        if not session_id:
            return list(messages)

        try:
            stored = self._sessions.history(session_id)
        except SessionNotFoundError:
            logger.warning(f"Session {session_id} not found, using request messages")
            return list(messages)

        latest = messages[-1]
        # The client usually saves the user message before asking for a reply
        if stored and stored[-1].id == latest.id:
            return stored
        return [*stored, latest]

    async def prepare(
        self,
        messages: list[Message],
        model_id: str,
        session_id: str | None = None,
        settings: SettingsConfig | dict[str, Any] | None = None,
    ) -> ChatTurn:
        """Resolve model, settings, history and prompt for a chat request.

        Runs the web search when it is enabled in settings.

        Raises:
            UnsupportedModelError: If model_id is not in the catalog.
            ValueError: If messages is empty.
        """
        if not messages:
            raise ValueError("Messages array is required")

        model = self.resolve_model(model_id)
        final_settings = validate_settings(settings)
        history = self.resolve_history(messages, session_id)

        search_block = ""
        if final_settings.enable_web_search:
            query = next((m.content for m in reversed(history) if m.role == "user"), "")
            if query.strip():
                results = await self._web_search.search(
                    query, final_settings.web_search_results_limit
                )
                search_block = format_search_results(query, results)

        prompt = build_prompt(history, final_settings.file_content_limit, search_block)
        return ChatTurn(model=model, settings=final_settings, history=history, prompt=prompt)

    def _create_model(self, model: ModelInfo) -> Any:
        """Instantiate the Agno model class for a catalog entry.

        Raises:
            ProviderUnavailableError: If the provider's API key is missing.
        """
        cfg = self._config
        provider = model.provider_kind

        if provider is Provider.OPENAI:
            if not cfg.openai_api_key:
                raise ProviderUnavailableError("OPENAI_API_KEY is not configured")
            return OpenAIChat(
                id=model.id,
                api_key=cfg.openai_api_key,
                base_url=cfg.openai_base_url,
                temperature=cfg.temperature,
                max_tokens=cfg.max_tokens,
                timeout=cfg.request_timeout,
            )

        if provider is Provider.GEMINI:
            if not cfg.google_api_key:
                raise ProviderUnavailableError("GOOGLE_API_KEY is not configured")
            return Gemini(
                id=model.id,
                api_key=cfg.google_api_key,
                temperature=cfg.temperature,
                max_output_tokens=cfg.max_tokens,
                # google-genai takes its HTTP timeout in milliseconds
                client_params={"http_options": {"timeout": int(cfg.request_timeout * 1000)}},
            )

        if provider is Provider.CLAUDE:
            if not cfg.anthropic_api_key:
                raise ProviderUnavailableError("ANTHROPIC_API_KEY is not configured")
            return Claude(
                id=model.id,
                api_key=cfg.anthropic_api_key,
                temperature=cfg.temperature,
                max_tokens=cfg.max_tokens,
                timeout=cfg.request_timeout,
            )

        return Ollama(
            id=model.id,
            host=cfg.ollama_host,
            timeout=cfg.request_timeout,
            options={"temperature": cfg.temperature},
        )

    def _create_agent(self, turn: ChatTurn) -> Agent:
        system_prompt = turn.settings.system_prompt.strip()
        return Agent(
            model=self._create_model(turn.model),
            system_message=system_prompt or None,
            markdown=False,
        )

    def _fallback(self, turn: ChatTurn, error: Exception) -> str:
        """Return the canned reply if this provider may fall back, else raise."""
        provider = turn.model.provider_kind
        may_fall_back = provider is Provider.OLLAMA or (
            provider in (Provider.GEMINI, Provider.CLAUDE)
            and isinstance(error, ProviderUnavailableError)
        )
        if not may_fall_back:
            if isinstance(error, ProviderError):
                raise error
            raise ProviderError(
                f"Failed to get response from {turn.model.provider}: {error}"
            ) from error

        logger.warning(f"{turn.model.provider} unavailable ({error}), using mock response")
        return mock_reply(turn.model, turn.last_message)

    async def generate(self, turn: ChatTurn) -> str:
        """Run the model once and return the complete reply.

        Raises:
            ProviderError: If the provider fails and has no fallback.
        """
        try:
            agent = self._create_agent(turn)
            response = await agent.arun(input=turn.prompt)
        except Exception as e:
            return self._fallback(turn, e)

        status = getattr(response, "status", None)
        if getattr(status, "value", status) == "ERROR":
            return self._fallback(turn, ProviderError(str(response.content)))

        logger.info(f"Generated response with {turn.model.id}")
        return response.content or NO_RESPONSE

    async def stream(self, turn: ChatTurn) -> AsyncGenerator[str]:
        """Run the model and yield reply text as it arrives.

        Fallback replies are yielded as a single chunk. A failure after text
        has already been streamed is raised rather than papered over.

        Raises:
            ProviderError: If the provider fails and has no fallback.
        """
        streamed = False
        try:
            agent = self._create_agent(turn)
            async for event in agent.arun(input=turn.prompt, stream=True):
                kind = getattr(event, "event", None)
                if kind == _ERROR_EVENT:
                    raise ProviderError(str(getattr(event, "content", "") or "Run failed"))
                content = getattr(event, "content", None)
                if kind == _CONTENT_EVENT and isinstance(content, str) and content:
                    streamed = True
                    yield content
        except Exception as e:
            if streamed:
                raise ProviderError(
                    f"{turn.model.provider} stream interrupted: {e}"
                ) from e
            yield self._fallback(turn, e)
            return

        if not streamed:
            yield NO_RESPONSE

    async def complete(
        self,
        messages: list[Message],
        model_id: str,
        session_id: str | None = None,
        settings: SettingsConfig | dict[str, Any] | None = None,
    ) -> str:
        """Prepare and run a chat request in one step.

        Args:
            messages: Conversation from the client, ending with the new message.
            model_id: Catalog model id.
            session_id: Optional stored session providing the history.
            settings: Optional user settings (defaults when absent).

        Returns:
            Complete reply text.
        """
        turn = await self.prepare(messages, model_id, session_id, settings)
        return await self.generate(turn)


# Module-level singleton instance
_chat_service: ChatService | None = None


def get_chat_service() -> ChatService:
    """Get or create the global chat service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The ChatService instance.
    """
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
