#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Configures the cache service: lifespan-managed cache resources, request id
correlation, error handling and routes.

Run:
    uvicorn litecache.application.app:app --host 0.0.0.0 --port 8080
"""

import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from litecache.application.api.middleware.error_handler import (
    ErrorHandlingMiddleware,
    handle_litecache_error,
)
from litecache.application.api.routes.admin import router as admin_router
from litecache.application.api.routes.cache_admin import router as cache_admin_router
from litecache.application.api.routes.cache_internal import router as cache_internal_router
from litecache.application.api.routes.health import router as health_router
from litecache.core.config.constants import HEADER_REQUEST_ID, Stage
from litecache.core.config.settings import Settings, get_settings
from litecache.core.exceptions import LiteCacheError
from litecache.core.logging.logger import (
    clear_request_id,
    get_logger,
    log_stage,
    set_request_id,
    setup_logging,
)
from litecache.infrastructure.cache.cache_manager import build_cache_manager, close_cache_manager

logger = get_logger(__name__)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the cache resources on startup and release them on shutdown.

    The SQLite connection itself is opened lazily on first use.
    """
    settings: Settings = app.state.settings

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Starting cache service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
    )

    cache_manager = build_cache_manager(settings, transport=app.state.forward_transport)
    app.state.cache_manager = cache_manager

    info = await cache_manager.instances.get_instance_info()
    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Application startup complete",
        current_instance=info.current_instance,
        primary_instance=info.primary_instance,
        always_fresh=cache_manager.always_fresh,
    )

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await close_cache_manager(cache_manager)
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    settings: Settings | None = None,
    forward_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to build with (defaults to the global settings)
        forward_transport: httpx transport for forwarded writes (tests)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Two-tier read-through cache with LiteFS primary/replica coordination",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.forward_transport = forward_transport

    # Middleware runs in reverse registration order: request id binds first,
    # so errors caught below it are logged with the request id.
    app.add_middleware(ErrorHandlingMiddleware, include_traceback=settings.is_development)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Bind X-Request-ID (or a fresh id) to the logging context."""
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    app.add_exception_handler(LiteCacheError, handle_litecache_error)

    app.include_router(health_router)
    app.include_router(cache_internal_router)
    app.include_router(cache_admin_router)
    app.include_router(admin_router)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": settings.app.APP_NAME,
            "version": settings.app.APP_VERSION,
            "environment": settings.app.ENVIRONMENT,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# Create application instance
app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "litecache.application.app:app",
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        reload=settings.is_development,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
