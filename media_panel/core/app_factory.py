"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from media_panel import __version__
from media_panel.config import get_settings
from media_panel.core.lifespan import lifespan
from media_panel.core.middleware import setup_middleware
from media_panel.middleware.error_handlers import register_error_handlers
from media_panel.routers import health_router, library_router, player_router, view_router


def custom_openapi(app: FastAPI):
    """Generate the OpenAPI schema without the HTML tile fragments."""
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        license_info=app.license_info,
    )

    # Tile endpoints are HTML fragments for HTMX, not useful in API docs
    paths_to_remove = [path for path in openapi_schema.get("paths", {}) if path.startswith("/tiles/")]
    for path in paths_to_remove:
        del openapi_schema["paths"][path]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Media Panel API",
        description="""
        **Media Panel** - control one networked playback device from a browser

        ## Synchronization
        A background loop polls the device for volume, position and transport
        state on every tick and for the play queue on every N-th tick. All
        GET endpoints return the state derived on the last tick; they never
        wait on the device.

        ## Queue positions
        Queue endpoints address rows by **display position**: 1 is always the
        track currently playing, followed by the rest of the queue with
        wrap-around. The panel translates display positions to device queue
        positions.

        ## Errors
        Device failures are returned as `{"error": {"code", "message", "details"}}`
        with `DEVICE_REMOTE_ERROR` (502) or `DEVICE_TRANSPORT_ERROR` (503).

        ## Health & Monitoring
        - `/health` - Basic health check
        - `/health/live` - Liveness check
        - `/health/ready` - Readiness check (device reachable, loop polling)
        - `/debug` - Synchronization state and diagnostics
        """,
        version=__version__,
        lifespan=lifespan,
        license_info={
            "name": "MIT",
        },
    )

    setup_middleware(app, settings)
    register_error_handlers(app)

    # View routes (HTML page and tile fragments) - no prefix
    app.include_router(view_router.router, tags=["views"])
    app.include_router(health_router.router, tags=["health"])
    app.include_router(player_router.router, prefix="/api/player", tags=["player"])
    app.include_router(library_router.router, prefix="/api/library", tags=["library"])

    app.openapi = lambda: custom_openapi(app)

    return app
