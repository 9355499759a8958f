"""
FastAPI Application Factory

Assembles the app:
- Routes (control, scripts, cron, system)
- Exception handlers
- CORS

The same factory is used by main_asyncio.py and by the tests, which call
set_service_container() with in-memory services before sending requests.
"""
import sys
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import control, scripts, cron, system
from api.middleware.error_handler import register_exception_handlers
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


def create_app(
    title: str = "LED Ring Controller",
    description: str = "REST API for a 60-LED ring: modes, buffered animations and AI-generated scripts",
    version: str = "1.0.0",
    docs_enabled: bool = True,
    cors_origins: list[str] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: all)

    Returns:
        Configured FastAPI application ready to run
    """

    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    log.info(f"Creating FastAPI app: {title} v{version}")

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    if cors_origins is None:
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    log.debug(f"CORS enabled for origins: {cors_origins}")

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================

    app.include_router(control.router, prefix="/api")
    app.include_router(scripts.router, prefix="/api")
    app.include_router(cron.router, prefix="/api")
    app.include_router(system.router, prefix="/api")

    log.debug("Routes registered: control, scripts, cron, system (/api)")

    # =========================================================================
    # Health Check Endpoint
    # =========================================================================

    @app.get(
        "/api/health",
        tags=["System"],
        summary="Health check",
        description="Check if API is running and responding"
    )
    async def health_check():
        """Simple health check endpoint for monitoring"""
        return {
            "status": "healthy",
            "service": "led-ring-api",
            "version": version
        }

    @app.get("/", include_in_schema=False)
    async def root():
        """Point root at the documentation"""
        return JSONResponse(
            {
                "message": title,
                "docs": "/docs",
                "health": "/api/health"
            }
        )

    log.info(f"FastAPI app created successfully: {title}")

    return app
