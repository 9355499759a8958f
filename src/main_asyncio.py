"""
main_asyncio.py - Application entry point for the LED ring controller
--------------------------------------------------------------------

Responsible for:
- loading configuration and configuring the logger
- wiring stores and services (Dependency Injection)
- starting the API server in the asyncio loop
"""

import sys

# ---------------------------------------------------------------------------
# UTF-8 ENCODING FIX
# ---------------------------------------------------------------------------

# Set UTF-8 encoding for output BEFORE any imports (fixes Unicode symbol rendering)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
import uvicorn
from fastapi import FastAPI

from utils.logger import get_logger, configure_logger
from api.main import create_app
from api.dependencies import set_service_container
from managers import ConfigManager
from models.enums import LogCategory
from services import build_services

log = get_logger().for_category(LogCategory.SYSTEM)

# ---------------------------------------------------------------------------
# API SERVER RUNNER
# ---------------------------------------------------------------------------

async def run_api_server(app: FastAPI, host: str = "0.0.0.0", port: int = 8000) -> None:
    """
    Run FastAPI/Uvicorn server in the current asyncio event loop.

    The server runs until interrupted (uvicorn handles SIGINT/SIGTERM).
    """
    config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        loop="asyncio",
        log_level="info",
        access_log=False,
    )

    server = uvicorn.Server(config)

    try:
        log.debug(f"🌐 Starting API server on {host}:{port}")
        await server.serve()
    except asyncio.CancelledError:
        log.debug("🌐 API server cancelled (expected during shutdown)")
        raise

# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main():
    """Main async entry point (dependency injection and server startup)."""

    log.info("Loading configuration...")
    config_manager = ConfigManager()
    config = config_manager.load()
    configure_logger(config.logging.level, config.logging.use_colors)

    log.info("Initializing services...")
    services = build_services(config, config_manager)
    set_service_container(services)

    mode = await services.mode_store.get()
    log.info("Current LED mode restored", mode=mode.mode.value)

    app = create_app(
        docs_enabled=config.server.docs_enabled,
        cors_origins=config.server.cors_origins
    )

    log.info("🏁 Application initialized", host=config.server.host, port=config.server.port)
    await run_api_server(app, config.server.host, config.server.port)
    log.info("👋 LED ring controller shut down cleanly.")


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", error_type=type(e).__name__)
        sys.exit(1)
