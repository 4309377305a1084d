"""Server ports, run mode and the API address the UI talks to."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

load_dotenv()


class ServerConfig(BaseModel):
    """Process-level settings for the API and UI servers.

    Attributes:
        host: Interface both servers bind to.
        port: API port (the integrated server also serves the UI here).
        ui_port: NiceGUI port when running in separate mode.
        run_mode: "integrated" or "separate".
        reload: Pass --reload to uvicorn in separate mode.
        log_level: Root logging level.
        storage_secret: NiceGUI storage secret.
        api_base_url: URL the UI uses for API calls. Follows ``port`` unless set.
    """

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "8000")), ge=1, le=65535)
    ui_port: int = Field(
        default_factory=lambda: int(os.getenv("UI_PORT", "8080")), ge=1, le=65535
    )
    run_mode: str = Field(default_factory=lambda: os.getenv("RUN_MODE", "integrated"))
    reload: bool = Field(
        default_factory=lambda: os.getenv("RELOAD", "").lower() in {"1", "true", "yes"}
    )
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "aio-chat-secret")
    )
    api_base_url: str = Field(default_factory=lambda: os.getenv("API_BASE_URL", ""))

    @field_validator("run_mode", "log_level")
    @classmethod
    def normalise_case(cls, v: str) -> str:
        return v.strip().lower()

    @model_validator(mode="after")
    def default_api_base_url(self) -> "ServerConfig":
        if not self.api_base_url.strip():
            self.api_base_url = f"http://localhost:{self.port}"
        self.api_base_url = self.api_base_url.strip().rstrip("/")
        return self


def get_server_config() -> ServerConfig:
    """Create server configuration from environment."""
    return ServerConfig()
