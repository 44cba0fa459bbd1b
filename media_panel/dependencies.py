"""FastAPI dependencies for dependency injection."""

import httpx
from fastapi import Request

from media_panel.services.command_gateway import CommandGateway
from media_panel.services.library_browser import LibraryBrowser
from media_panel.services.sync_loop import SyncLoop
from media_panel.state_managers import DeviceStateStore


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Get the shared HTTP client from app state.

    Raises:
        RuntimeError: If HTTP client is not initialized.
    """
    client: httpx.AsyncClient | None = getattr(request.app.state, "http_client", None)

    if client is None:
        raise RuntimeError("HTTP client not initialized. This should never happen.")

    return client


async def get_sync_loop(request: Request) -> SyncLoop:
    """
    Get the session's sync loop from app state.

    Raises:
        RuntimeError: If the sync loop is not initialized.
    """
    sync_loop: SyncLoop | None = getattr(request.app.state, "sync_loop", None)

    if sync_loop is None:
        raise RuntimeError("Sync loop not initialized.")

    return sync_loop


async def get_device_state_store(request: Request) -> DeviceStateStore:
    """
    Get the device state store from app state.

    Raises:
        RuntimeError: If the store is not initialized.
    """
    store: DeviceStateStore | None = getattr(request.app.state, "device_state_store", None)

    if store is None:
        raise RuntimeError("Device state store not initialized.")

    return store


async def get_library_browser(request: Request) -> LibraryBrowser:
    """
    Get the library browser from app state.

    Raises:
        RuntimeError: If the library browser is not initialized.
    """
    browser: LibraryBrowser | None = getattr(request.app.state, "library_browser", None)

    if browser is None:
        raise RuntimeError("Library browser not initialized.")

    return browser


async def get_command_gateway(request: Request) -> CommandGateway:
    """
    Get the device command gateway from app state.

    Raises:
        RuntimeError: If the gateway is not initialized.
    """
    gateway: CommandGateway | None = getattr(request.app.state, "command_gateway", None)

    if gateway is None:
        raise RuntimeError("Command gateway not initialized.")

    return gateway
