"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aio_chat import __version__
from aio_chat.api.chat import router as chat_router
from aio_chat.api.search import router as search_router
from aio_chat.api.sessions import router as sessions_router
from aio_chat.api.translate import router as translate_router
from aio_chat.api.upload import router as upload_router
from aio_chat.config.provider_config import get_provider_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config = get_provider_config()
    configured = [
        name
        for name, key in (
            ("OpenAI", config.openai_api_key),
            ("Gemini", config.google_api_key),
            ("Claude", config.anthropic_api_key),
        )
        if key
    ]
    logger.info("Starting AIO Chat API...")
    logger.info(f"Providers with credentials: {', '.join(configured) or 'none'}")
    logger.info(f"Ollama host: {config.ollama_host}")
    yield
    logger.info("Shutting down AIO Chat API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="AIO Chat API",
        description=(
            "Chat with OpenAI, Gemini, Claude and Ollama models. Attach documents "
            "that are text-extracted and optionally translated, enrich prompts with "
            "web search results, and keep conversations in in-memory sessions."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)
    application.include_router(sessions_router)
    application.include_router(upload_router)
    application.include_router(translate_router)
    application.include_router(search_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "aio-chat"}

    return application


app = create_app()
