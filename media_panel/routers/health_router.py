"""Health and debug endpoints."""

import os
import platform
import sys
import time
from datetime import UTC, datetime

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from media_panel import __version__
from media_panel.cache import get_cache
from media_panel.config import get_settings
from media_panel.dependencies import get_command_gateway, get_http_client, get_sync_loop
from media_panel.models import DebugInfo, DetailedHealthResponse, Failure, HealthResponse
from media_panel.security import get_cors_origins, get_trusted_hosts
from media_panel.services.command_gateway import Command, CommandGateway
from media_panel.services.sync_loop import LoopState, SyncLoop

router = APIRouter()

DEVICE_CHECK_CACHE_KEY = "health:device_check"
DEVICE_CHECK_TTL_SECONDS = 10


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    For dependency status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/live", response_model=HealthResponse)
async def liveness_check():
    """Liveness check - is the process serving requests at all?"""
    return HealthResponse(status="alive", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    client: httpx.AsyncClient = Depends(get_http_client),
    sync_loop: SyncLoop = Depends(get_sync_loop),
    gateway: CommandGateway = Depends(get_command_gateway),
):
    """Readiness check - can the panel show live device state?

    Checks:
    - HTTP client initialization
    - Sync loop is polling
    - Device answers ``get-transport-info`` (cached 10s)

    **Returns:**
    - 200: Panel is ready
    - 503: Panel is not ready
    """
    checks = {}
    all_healthy = True

    checks["http_client"] = "ok" if client else "failed"
    if not client:
        all_healthy = False

    polling = sync_loop.state == LoopState.POLLING and sync_loop.is_running
    checks["sync_loop"] = "ok" if polling else "not_polling"
    if not polling:
        all_healthy = False

    cache = get_cache()
    cached_result = await cache.get(DEVICE_CHECK_CACHE_KEY)
    if cached_result is None:
        result = await gateway.send(Command.GET_TRANSPORT_INFO)
        cached_result = f"failed: {result.message[:50]}" if isinstance(result, Failure) else "ok"
        await cache.set(DEVICE_CHECK_CACHE_KEY, cached_result, DEVICE_CHECK_TTL_SECONDS)

    checks["device"] = cached_result
    if cached_result != "ok":
        all_healthy = False

    status_code = 200 if all_healthy else 503
    status = "healthy" if all_healthy else "unhealthy"

    return JSONResponse(
        status_code=status_code,
        content=DetailedHealthResponse(
            status=status,
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )


@router.get(
    "/debug",
    response_model=DebugInfo,
    responses={200: {"description": "System diagnostics and synchronization state"}},
)
async def debug_info(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
):
    """Debug endpoint with system state and diagnostics.

    Returns system info, the synchronization state (poll count, anchor,
    queue size, last error), configuration and request statistics.
    """
    settings = get_settings()
    cache = get_cache()
    snapshot = await sync_loop.store.snapshot()

    uptime_seconds = int(time.time() - getattr(request.app.state, "startup_time", time.time()))

    system_info = {
        "version": __version__,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        "platform": platform.system(),
        "uptime_seconds": uptime_seconds,
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
    }

    cache_size = len(cache)
    state_info = {
        "sync_loop": sync_loop.state.value,
        "timer_running": sync_loop.is_running,
        "poll_count": snapshot.poll_count,
        "current_track_index": snapshot.current_track_index,
        "queue_size": snapshot.last_queue_size,
        "transport_state": snapshot.transport_state.value,
        "last_error": snapshot.last_error,
        "last_success_at": sync_loop.store.last_success_at,
        "cache_size": cache_size,
        "cache_keys": ", ".join(cache.keys()) if cache_size < 20 else f"{cache_size} keys",
    }

    config_info = {
        "api_host": settings.api_host,
        "api_port": settings.api_port,
        "device_base_url": settings.device_base_url,
        "poll_interval_seconds": settings.poll_interval_seconds,
        "queue_refresh_every": settings.queue_refresh_every,
        "cors_origins": get_cors_origins(settings),
        "trusted_hosts": get_trusted_hosts(settings),
    }

    return DebugInfo(
        system=system_info,
        state=state_info,
        config=config_info,
        requests={"total_requests": getattr(request.app.state, "request_count", 0)},
    )
