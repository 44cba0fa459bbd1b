"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from media_panel.exceptions import PanelException
from media_panel.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


async def panel_exception_handler(request: Request, exc: PanelException) -> JSONResponse:
    """Turn PanelException subclasses into structured JSON errors."""
    log_with_context(
        logger,
        "warning",
        "Panel error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=str(request.url),
        event_type="panel_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions without leaking details to the client."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=str(request.url),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application."""
    app.add_exception_handler(PanelException, panel_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
