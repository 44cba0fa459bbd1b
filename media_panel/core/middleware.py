"""Middleware configuration."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from media_panel.config import Settings
from media_panel.logging_config import get_logger, log_with_context
from media_panel.security import get_cors_origins, get_trusted_hosts

logger = get_logger(__name__)


def setup_middleware(app: FastAPI, settings: Settings) -> Limiter:
    """Configure all middleware for the application.

    Returns:
        Limiter instance for rate limiting
    """
    cors_origins = get_cors_origins(settings)
    log_with_context(
        logger,
        "info",
        "Configuring CORS middleware",
        origins=cors_origins,
        event_type="security_config",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    trusted_hosts = get_trusted_hosts(settings)
    log_with_context(
        logger,
        "info",
        "Configuring TrustedHost middleware",
        hosts=trusted_hosts,
        event_type="security_config",
    )
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=trusted_hosts)

    limiter = Limiter(key_func=get_remote_address, default_limits=["120/minute"])
    app.state.limiter = limiter

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        """Count total requests for the debug endpoint."""
        app.state.request_count = getattr(app.state, "request_count", 0) + 1
        return await call_next(request)

    return limiter
