"""Main entry point for running the User Service FastAPI application."""

import os
import sys

import uvicorn
from loguru import logger

from user_service.api.main import app
from user_service.core.config import get_settings
from user_service.core.logging import setup_logging

LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "default": {
            "class": "user_service.core.logging.InterceptHandler",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
    },
}


def main() -> None:
    """Run the server until it is told to stop.

    uvicorn handles SIGINT/SIGTERM by refusing new connections, draining
    in-flight requests and running the application's shutdown. The process
    exits with status 1 when releasing the database failed.
    """
    settings = get_settings()

    setup_logging(settings)

    port = int(os.environ.get("PORT", settings.api_port))

    if settings.debug:
        logger.info(
            f"Starting Uvicorn on http://{settings.api_host}:{port} "
            "(development mode with auto-reload)"
        )
        uvicorn.run(
            "user_service.api.main:app",
            host=settings.api_host,
            port=port,
            reload=True,
            log_config=LOG_CONFIG,
        )
        return

    logger.info(f"Starting Uvicorn on http://{settings.api_host}:{port}")
    uvicorn.run(
        app,
        host=settings.api_host,
        port=port,
        reload=False,
        log_config=LOG_CONFIG,
    )

    if app.state.shutdown_failed:
        logger.error("Shutdown did not complete cleanly")
        sys.exit(1)


if __name__ == "__main__":
    main()
