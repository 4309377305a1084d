"""Application entry point.

Integrated mode serves the API and the NiceGUI page from one uvicorn server on
PORT. Separate mode runs the API on PORT and the UI on UI_PORT, with the UI
pointed at the API through API_BASE_URL.
"""

import logging
import os
import sys

from dotenv import load_dotenv

from aio_chat.config.server_config import ServerConfig, get_server_config

# Load environment variables before any other imports that might need them
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(config: ServerConfig) -> None:
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def api_command(config: ServerConfig) -> list[str]:
    """Build the uvicorn command line for the API process in separate mode."""
    command = [
        sys.executable,
        "-m",
        "uvicorn",
        "aio_chat.api.app:app",
        "--host",
        config.host,
        "--port",
        str(config.port),
        "--log-level",
        config.log_level,
    ]
    if config.reload:
        command.append("--reload")
    return command


def ui_environment(config: ServerConfig) -> dict[str, str]:
    """Environment for the UI process, with the API address pinned."""
    return {**os.environ, "API_BASE_URL": config.api_base_url, "UI_PORT": str(config.ui_port)}


def run_integrated(config: ServerConfig) -> None:
    """Run FastAPI with NiceGUI mounted on the same server."""
    import uvicorn
    from nicegui import ui

    from aio_chat.api.app import create_app
    from aio_chat.ui.chat_page import APP_TITLE, chat_page  # noqa: F401 - Registers the page

    app = create_app()

    ui.run_with(
        app,
        title=APP_TITLE,
        favicon="✈️",
        storage_secret=config.storage_secret,
    )

    logger.info(f"Serving API and chat UI on {config.api_base_url}")
    logger.info(f"API docs available at {config.api_base_url}/docs")

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level)


def run_separate(config: ServerConfig) -> None:
    """Run FastAPI and NiceGUI as two child processes until either exits."""
    import asyncio
    import subprocess

    async def run_servers() -> None:
        logger.info(f"Starting API on port {config.port} (UI will call {config.api_base_url})")
        logger.info(f"Starting chat UI on port {config.ui_port}")

        api_proc = subprocess.Popen(api_command(config))
        ui_proc = subprocess.Popen(
            [sys.executable, "-c", "from aio_chat.ui.chat_page import main; main()"],
            env=ui_environment(config),
        )

        try:
            while api_proc.poll() is None and ui_proc.poll() is None:
                await asyncio.sleep(1)
        except KeyboardInterrupt:
            logger.info("Shutting down servers...")
        finally:
            for proc in (api_proc, ui_proc):
                proc.terminate()
                proc.wait()

    asyncio.run(run_servers())


def main() -> None:
    """Start the app in the mode named by RUN_MODE."""
    config = get_server_config()
    configure_logging(config)

    logger.info(f"Starting AIO Chat in {config.run_mode} mode")

    if config.run_mode == "separate":
        run_separate(config)
    else:
        run_integrated(config)


if __name__ == "__main__":
    main()
