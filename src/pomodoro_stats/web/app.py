"""
FastAPI application for the Pomodoro Stats dashboard.

PURPOSE: Main application factory and server runner.
AI CONTEXT: Creates app with all routes registered; storage is injectable.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from .routes import router

if TYPE_CHECKING:
    from ..storage import SessionRepository

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Manage application lifecycle with startup/shutdown hooks.

    Business context: Startup logging confirms which data directory the
    dashboard reads, which is the first thing to check when the page
    shows no sessions.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    storage = app.state.storage
    location = getattr(storage, "sessions_file", "default storage")
    logger.info(f"Pomodoro Stats dashboard starting (v{__version__}, {location})")
    yield
    logger.info("Pomodoro Stats dashboard shutting down")


def create_app(storage: SessionRepository | None = None) -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Factory function that creates a new FastAPI instance with all routes
    registered. Uses the application factory pattern for testability.

    Args:
        storage: Repository every request should use. None means a fresh
            StorageManager on the configured directory per request.

    Returns:
        Configured FastAPI application instance with:
        - Page routes (/weekly, /monthly, /add)
        - Chart routes (/charts/*.png)
        - JSON routes (/api/*)
        - OpenAPI documentation available at /docs

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app(StorageManager(filesystem=mock_fs)))
        >>> client.get('/weekly').status_code
        200
    """
    app = FastAPI(
        title="Pomodoro Stats",
        description="Weekly and monthly statistics for logged Pomodoro sessions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.storage = storage

    app.include_router(router)

    return app


def run_dashboard(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Pomodoro Stats web dashboard server.

    Args:
        host: Network interface to bind the server to. Use '127.0.0.1'
            for local-only access (default) or '0.0.0.0' for network access.
        port: TCP port number for the HTTP server. Default 8000.
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity. One of 'critical', 'error',
            'warning', 'info' (default), 'debug', or 'trace'.

    Returns:
        None. This function blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.
    """
    uvicorn.run(
        "pomodoro_stats.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    run_dashboard()
