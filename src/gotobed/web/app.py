"""
FastAPI application for the gotobed dashboard.

PURPOSE: Application factory and server runner.
AI CONTEXT: Creates app with all routes registered.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from ..config import Config
from .routes import router

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001
    """
    Log dashboard startup and shutdown.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    logger.info("gotobed dashboard starting (v%s)", __version__)
    yield
    logger.info("gotobed dashboard shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Returns:
        FastAPI application with the page, chart and API routes.

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get('/').status_code
        200
    """
    app = FastAPI(
        title="gotobed",
        description="Bedtime history chart and streaks",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


def run_dashboard(
    host: str | None = None,
    port: int | None = None,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the dashboard server.

    Args:
        host: Bind address. Default: Config.get_host() (GOTOBED_PLOT_HOST)
        port: TCP port. Default: Config.get_port() (GOTOBED_PLOT_PORT)
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity.

    Returns:
        None. Blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.
    """
    bind_host = host or Config.get_host()
    bind_port = port or Config.get_port()
    logger.info(f"Serving plot visualization at {bind_host}:{bind_port}")
    uvicorn.run(
        "gotobed.web.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=log_level,
    )


# For direct execution
if __name__ == "__main__":
    run_dashboard()
