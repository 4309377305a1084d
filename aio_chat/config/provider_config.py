"""Provider credentials and generation parameters loaded from the environment.

Each provider is optional. A blank key means the provider is not configured,
which the chat service treats differently per provider (hard error for
OpenAI, canned reply for Gemini and Claude).
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class ProviderConfig(BaseModel):
    """Credentials and sampling parameters for all chat providers.

    Attributes:
        openai_api_key: OpenAI API key.
        openai_base_url: Base URL for OpenAI-compatible APIs (None for default).
        google_api_key: Google AI Studio key for Gemini.
        anthropic_api_key: Anthropic key for Claude.
        ollama_host: URL of the local Ollama server.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
        request_timeout: Seconds to wait for outbound HTTP calls.
    """

    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for OpenAI",
    )
    openai_base_url: str | None = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    google_api_key: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY", os.getenv("GEMINI_API_KEY", "")),
        description="API key for Gemini",
    )
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="API key for Claude",
    )
    ollama_host: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        description="Local Ollama server URL",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=2000,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "30")),
        gt=0,
        description="Timeout in seconds for outbound HTTP requests",
    )

    @field_validator("openai_api_key", "google_api_key", "anthropic_api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        """Strip whitespace so a blank key reads as unconfigured."""
        return (v or "").strip()

    @field_validator("ollama_host")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


def get_provider_config() -> ProviderConfig:
    """Create provider configuration from environment."""
    return ProviderConfig()
