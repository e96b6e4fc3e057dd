"""FastAPI application initialization and configuration module.

This module handles:
- Application lifecycle management (startup/shutdown)
- Middleware registration in the correct order
- Exception handler registration
- Router registration and the health check endpoint

Startup verifies the database is reachable and creates missing tables.
Shutdown, which uvicorn starts after it stops accepting connections and has
drained in-flight requests, disposes the database engine. A failure during
that release is recorded on ``app.state.shutdown_failed`` so the process
entry point can exit non-zero.
"""

import asyncio
import os
import signal
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from user_service.api.middleware.error_handler import register_exception_handlers
from user_service.api.middleware.request_context import RequestContextMiddleware
from user_service.api.middleware.request_logging import RequestLoggingMiddleware
from user_service.api.routes import users_router
from user_service.api.utils.responses import ORJSONResponse
from user_service.core.config import Settings, get_settings
from user_service.core.logging import setup_logging
from user_service.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_tables,
)


def _handle_loop_exception(
    loop: asyncio.AbstractEventLoop, context: dict[str, Any]
) -> None:
    """Treat an unhandled fault in background work as a termination request.

    SIGTERM is delivered to our own process so the server runs its normal
    graceful shutdown.
    """
    exc = context.get("exception")
    logger.opt(exception=exc).critical(
        "Unhandled exception in background task: {}",
        context.get("message", "unknown error"),
    )
    loop.default_exception_handler(context)
    os.kill(os.getpid(), signal.SIGTERM)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    app_instance.state.shutdown_failed = False

    is_healthy, error_msg = await check_database_connection()
    if not is_healthy:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)
    logger.info("Database connection successful")

    if get_settings().database_config.create_tables:
        await create_tables()

    loop = asyncio.get_running_loop()
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(_handle_loop_exception)

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Shutting down gracefully")
    loop.set_exception_handler(previous_handler)
    try:
        await close_database()
    except Exception:
        app_instance.state.shutdown_failed = True
        logger.exception("Error while closing the database connection")
        raise
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    application.state.shutdown_failed = False

    # Register exception handlers BEFORE middleware
    register_exception_handlers(application)

    # Middleware run in reverse order of registration:
    # CORS -> request context -> request logging -> routes
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(users_router)

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for container orchestration and load balancers.

        Returns:
            dict[str, object]: Service status and database connectivity.
        """
        is_healthy, error_msg = await check_database_connection()

        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)

        return {
            "status": "healthy" if is_healthy else "degraded",
            "database": is_healthy,
        }

    return application


app = create_app()
