"""Application catalog: models, user settings defaults and their bounds.

Settings arrive from the browser on every chat and upload request, so they are
never trusted as-is. ``validate_settings`` clamps them into range and falls
back to defaults for anything missing or out of shape.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_SYSTEM_PROMPT = (
    "You are AIO Travel Itinerary assistant. You help users create, analyze, and "
    "manage travel itineraries. You can translate content, extract detailed "
    "information, generate quotations, and provide comprehensive travel planning "
    "assistance."
)

FILE_CONTENT_LIMIT_MIN = 100
FILE_CONTENT_LIMIT_MAX = 10000
FILE_CONTENT_LIMIT_DEFAULT = 5000

TRANSLATION_LIMIT_MIN = 100
TRANSLATION_LIMIT_MAX = 10000
TRANSLATION_LIMIT_DEFAULT = 5000

WEB_SEARCH_RESULTS_MIN = 1
WEB_SEARCH_RESULTS_MAX = 10
WEB_SEARCH_RESULTS_DEFAULT = 5

SYSTEM_PROMPT_MIN_LENGTH = 10
SYSTEM_PROMPT_MAX_LENGTH = 2000

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
SUPPORTED_FILE_TYPES = [".pdf", ".docx", ".doc", ".txt", ".html", ".htm"]

PREDEFINED_PROMPTS = [
    "Translate Itinerary",
    "Extract full detailed itinerary",
    "Generate a quotation",
    "Extract all inclusion",
    "Extract all exclusions",
]


class Provider(str, Enum):
    """LLM providers a model can be routed to."""

    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"
    OLLAMA = "ollama"


MODEL_CATALOG: dict[Provider, list[tuple[str, str]]] = {
    Provider.OPENAI: [
        ("gpt-4o", "GPT-4o"),
        ("gpt-4o-mini", "GPT-4o Mini"),
        ("gpt-4-turbo", "GPT-4 Turbo"),
        ("gpt-4", "GPT-4"),
        ("gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ],
    Provider.GEMINI: [
        ("gemini-pro", "Gemini Pro"),
        ("gemini-pro-vision", "Gemini Pro Vision"),
    ],
    Provider.CLAUDE: [
        ("claude-3-opus-20240229", "Claude 3 Opus"),
        ("claude-3-sonnet-20240229", "Claude 3 Sonnet"),
        ("claude-3-haiku-20240307", "Claude 3 Haiku"),
    ],
    Provider.OLLAMA: [
        ("phi4:14b", "Phi-4 14B"),
        ("phi3:14b", "Phi-3 14B"),
        ("bigllama/mistralv01-7b:latest", "BigLlama Mistral v0.1 7B"),
        ("magistral:latest", "Magistral"),
        ("gemma3:27b", "Gemma 3 27B"),
        ("llama3.2:latest", "Llama 3.2"),
        ("llama3.1:latest", "Llama 3.1"),
        ("mistral:instruct", "Mistral Instruct"),
        ("gemma3:latest", "Gemma 3"),
        ("gemma3:4b", "Gemma 3 4B"),
        ("qwen3:latest", "Qwen 3"),
        ("codegemma:7b", "CodeGemma 7B"),
        ("mixtral:latest", "Mixtral"),
        ("mixtral:8x7b", "Mixtral 8x7B"),
        ("qwen3:8b", "Qwen 3 8B"),
        ("deepseek-r1:latest", "DeepSeek R1"),
        ("mistral:latest", "Mistral"),
        ("llama3.3:latest", "Llama 3.3"),
        ("llama3.3:70b", "Llama 3.3 70B"),
        ("openchat:latest", "OpenChat"),
        ("mistral:7b", "Mistral 7B"),
        ("llama4:latest", "Llama 4"),
        ("llama4:scout", "Llama 4 Scout"),
    ],
}

DEFAULT_MODEL = "gpt-4"


class CamelModel(BaseModel):
    """Base model exchanged with the browser using camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModelInfo(CamelModel):
    """A selectable model and the provider that serves it.

    Attributes:
        id: Provider-side model identifier.
        name: Human readable label.
        provider: Capitalised provider label ("Openai", "Gemini", ...).
    """

    id: str
    name: str
    provider: str

    @property
    def provider_kind(self) -> Provider:
        return Provider(self.provider.lower())


class SettingsConfig(CamelModel):
    """User-adjustable chat settings.

    Attributes:
        file_content_limit: Max characters of an attached file sent to the model.
        translation_limit: Max characters handed to the translator.
        enable_translation: Translate uploaded documents to English.
        enable_web_search: Append web search results to the latest user message.
        web_search_results_limit: Number of search results to include.
        system_prompt: Instructions sent with every conversation.
    """

    file_content_limit: int = Field(
        default=FILE_CONTENT_LIMIT_DEFAULT,
        ge=FILE_CONTENT_LIMIT_MIN,
        le=FILE_CONTENT_LIMIT_MAX,
    )
    translation_limit: int = Field(
        default=TRANSLATION_LIMIT_DEFAULT,
        ge=TRANSLATION_LIMIT_MIN,
        le=TRANSLATION_LIMIT_MAX,
    )
    enable_translation: bool = True
    enable_web_search: bool = False
    web_search_results_limit: int = Field(
        default=WEB_SEARCH_RESULTS_DEFAULT,
        ge=WEB_SEARCH_RESULTS_MIN,
        le=WEB_SEARCH_RESULTS_MAX,
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        min_length=SYSTEM_PROMPT_MIN_LENGTH,
        max_length=SYSTEM_PROMPT_MAX_LENGTH,
    )


DEFAULT_SETTINGS = SettingsConfig()

# Accepted spellings for each settings field in loosely shaped input
_SETTING_KEYS = {
    name: (name, field.alias) for name, field in SettingsConfig.model_fields.items()
}


def _clamp(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = 0
    # Zero means "not set", matching what the settings form sends when blank
    if not number:
        number = default
    return max(low, min(high, number))


def _flag(value: Any, default: bool) -> bool:
    # Only real booleans count; "false" and 1 are not trusted
    return value if isinstance(value, bool) else default


def _lookup(raw: dict[str, Any], name: str) -> Any:
    for key in _SETTING_KEYS[name]:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def validate_settings(
    settings: SettingsConfig | dict[str, Any] | None,
) -> SettingsConfig:
    """Normalise user-supplied settings into a valid SettingsConfig.

    Numeric limits are clamped into their bounds, missing values use defaults,
    and a system prompt shorter than the minimum is replaced by the default.

    Args:
        settings: Partial settings as a dict (camelCase or snake_case keys),
            an already built SettingsConfig, or None.

    Returns:
        A fully populated SettingsConfig.
    """
    if settings is None:
        return DEFAULT_SETTINGS.model_copy()
    if isinstance(settings, SettingsConfig):
        raw = settings.model_dump()
    else:
        raw = dict(settings)

    enable_translation = _lookup(raw, "enable_translation")
    enable_web_search = _lookup(raw, "enable_web_search")
    prompt = _lookup(raw, "system_prompt")

    if isinstance(prompt, str) and len(prompt) >= SYSTEM_PROMPT_MIN_LENGTH:
        system_prompt = prompt[:SYSTEM_PROMPT_MAX_LENGTH]
    else:
        system_prompt = DEFAULT_SYSTEM_PROMPT

    return SettingsConfig(
        file_content_limit=_clamp(
            _lookup(raw, "file_content_limit"),
            FILE_CONTENT_LIMIT_MIN,
            FILE_CONTENT_LIMIT_MAX,
            FILE_CONTENT_LIMIT_DEFAULT,
        ),
        translation_limit=_clamp(
            _lookup(raw, "translation_limit"),
            TRANSLATION_LIMIT_MIN,
            TRANSLATION_LIMIT_MAX,
            TRANSLATION_LIMIT_DEFAULT,
        ),
        enable_translation=_flag(enable_translation, DEFAULT_SETTINGS.enable_translation),
        enable_web_search=_flag(enable_web_search, DEFAULT_SETTINGS.enable_web_search),
        web_search_results_limit=_clamp(
            _lookup(raw, "web_search_results_limit"),
            WEB_SEARCH_RESULTS_MIN,
            WEB_SEARCH_RESULTS_MAX,
            WEB_SEARCH_RESULTS_DEFAULT,
        ),
        system_prompt=system_prompt,
    )


def get_all_models() -> list[ModelInfo]:
    """Flatten the catalog into a list of models tagged with their provider."""
    return [
        ModelInfo(id=model_id, name=name, provider=provider.value.capitalize())
        for provider, models in MODEL_CATALOG.items()
        for model_id, name in models
    ]


def find_model(model_id: str) -> ModelInfo | None:
    """Look up a catalog model by id."""
    return next((m for m in get_all_models() if m.id == model_id), None)
