"""Form helpers for the chat page that do not depend on NiceGUI."""

from aio_chat.config.app_config import (
    FILE_CONTENT_LIMIT_MAX,
    FILE_CONTENT_LIMIT_MIN,
    SYSTEM_PROMPT_MAX_LENGTH,
    SYSTEM_PROMPT_MIN_LENGTH,
    TRANSLATION_LIMIT_MAX,
    TRANSLATION_LIMIT_MIN,
    WEB_SEARCH_RESULTS_MAX,
    WEB_SEARCH_RESULTS_MIN,
    SettingsConfig,
    find_model,
    get_all_models,
    validate_settings,
)


def models_by_provider() -> dict[str, dict[str, str]]:
    """Group the catalog as ``{provider: {model_id: name}}`` in catalog order."""
    groups: dict[str, dict[str, str]] = {}
    for model in get_all_models():
        groups.setdefault(model.provider, {})[model.id] = model.name
    return groups


def provider_of(model_id: str) -> str:
    """Provider label for a catalog model, or the first provider if unknown."""
    model = find_model(model_id)
    if model is not None:
        return model.provider
    return next(iter(models_by_provider()))


def settings_errors(
    file_limit: float | None,
    translation_limit: float | None,
    results_limit: float | None,
    prompt: str,
) -> str | None:
    """Return the first validation problem in the settings form, if any."""
    if file_limit is None or not FILE_CONTENT_LIMIT_MIN <= file_limit <= FILE_CONTENT_LIMIT_MAX:
        return "File content limit must be between 100 and 10,000 characters"
    if translation_limit is None or not (
        TRANSLATION_LIMIT_MIN <= translation_limit <= TRANSLATION_LIMIT_MAX
    ):
        return "Translation limit must be between 100 and 10,000 characters"
    if results_limit is None or not WEB_SEARCH_RESULTS_MIN <= results_limit <= WEB_SEARCH_RESULTS_MAX:
        return "Web search results must be between 1 and 10"
    prompt = prompt.strip()
    if len(prompt) < SYSTEM_PROMPT_MIN_LENGTH:
        return "System prompt must be at least 10 characters long"
    if len(prompt) > SYSTEM_PROMPT_MAX_LENGTH:
        return "System prompt must be at most 2,000 characters long"
    return None


def settings_from_form(
    file_limit: float,
    translation_limit: float,
    enable_translation: bool,
    enable_web_search: bool,
    results_limit: float,
    prompt: str,
) -> SettingsConfig:
    """Build settings from raw form values, clamping anything out of bounds."""
    return validate_settings(
        {
            "file_content_limit": int(file_limit),
            "translation_limit": int(translation_limit),
            "enable_translation": bool(enable_translation),
            "enable_web_search": bool(enable_web_search),
            "web_search_results_limit": int(results_limit),
            "system_prompt": prompt.strip(),
        }
    )
