"""FastAPI application factory and error mapping for the chart API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chartdesk.dashboard.routes import api
from chartdesk.exceptions import (
    InvalidSymbolError,
    MarketDataError,
    SettingsNotFoundError,
    UpstreamUnavailableError,
    WatchlistDuplicateError,
)
from chartdesk.logging import get_logger

logger = get_logger(__name__)


def _status_for(exc: Exception) -> int:
    if isinstance(exc, InvalidSymbolError):
        return 404
    if isinstance(exc, UpstreamUnavailableError):
        return 503
    if isinstance(exc, SettingsNotFoundError):
        return 404
    if isinstance(exc, WatchlistDuplicateError):
        return 400
    return 502


async def _chartdesk_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render typed errors as {"error": message} so the UI can show the upstream text."""
    status_code = _status_for(exc)
    logger.warning(
        "request_failed",
        path=request.url.path,
        status_code=status_code,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(content={"error": str(exc)}, status_code=status_code)


def create_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to wire services onto app.state.

    Returns:
        Configured FastAPI application with API routes and error handlers.
    """
    app = FastAPI(title="Chartdesk", lifespan=lifespan)

    app.add_exception_handler(MarketDataError, _chartdesk_error_handler)
    app.add_exception_handler(SettingsNotFoundError, _chartdesk_error_handler)
    app.add_exception_handler(WatchlistDuplicateError, _chartdesk_error_handler)

    app.include_router(api.router, prefix="/api")

    return app
