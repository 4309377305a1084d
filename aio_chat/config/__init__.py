"""Configuration for the chat application.

Three layers:
    - app_config: model catalog, predefined prompts, user settings and limits
    - provider_config: API keys and endpoints read from the environment
    - server_config: ports, run mode and the API address used by the UI
"""

from aio_chat.config.app_config import (
    DEFAULT_SETTINGS,
    ModelInfo,
    Provider,
    SettingsConfig,
    find_model,
    get_all_models,
    validate_settings,
)
from aio_chat.config.provider_config import ProviderConfig, get_provider_config
from aio_chat.config.server_config import ServerConfig, get_server_config

__all__ = [
    "DEFAULT_SETTINGS",
    "ModelInfo",
    "Provider",
    "ProviderConfig",
    "ServerConfig",
    "SettingsConfig",
    "find_model",
    "get_all_models",
    "get_provider_config",
    "get_server_config",
    "validate_settings",
]
