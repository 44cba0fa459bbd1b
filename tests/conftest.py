"""Pytest configuration and shared fixtures."""

import os

# Settings are read once per process; point them at an address nothing
# listens on before the application is imported.
os.environ.setdefault("DEVICE_BASE_URL", "http://127.0.0.1:9")
os.environ.setdefault("TRUSTED_HOSTS", "localhost,127.0.0.1,testserver")
os.environ.setdefault("POLL_INTERVAL_SECONDS", "3600")
os.environ.setdefault("DEVICE_TIMEOUT_SECONDS", "1")

import asyncio  # noqa: E402
from collections.abc import Mapping  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from media_panel.cache import SimpleCache  # noqa: E402
from media_panel.config import Settings  # noqa: E402
from media_panel.dependencies import get_library_browser, get_sync_loop  # noqa: E402
from media_panel.main import app as fastapi_app  # noqa: E402
from media_panel.models import CommandResult, Success, TrackInfo  # noqa: E402
from media_panel.services.command_gateway import Command  # noqa: E402
from media_panel.services.library_browser import LibraryBrowser  # noqa: E402
from media_panel.services.queue_window import QueueWindow  # noqa: E402
from media_panel.services.sync_loop import SyncLoop  # noqa: E402
from media_panel.state_managers import DeviceStateStore  # noqa: E402


class FakeGateway:
    """Records every command and answers from a table of canned results."""

    def __init__(self, responses: Mapping[str, CommandResult] | None = None):
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.responses: dict[str, CommandResult] = dict(responses or {})

    async def send(self, command, params=None, endpoint=None) -> CommandResult:
        name = Command(command).value
        self.calls.append((name, dict(params or {})))
        return self.responses.get(name, Success())

    def count(self, name: str) -> int:
        return sum(1 for called, _ in self.calls if called == name)

    def params_for(self, name: str) -> list[dict[str, Any]]:
        return [params for called, params in self.calls if called == name]


@pytest.fixture
def queue_payload():
    """Queue as the device sends it (wire field names)."""
    return [
        {"ID": "Q:0/1", "Creator": "Miles Davis", "Album": "Kind of Blue", "Title": "So What"},
        {"ID": "Q:0/2", "Creator": "Miles Davis", "Album": "Kind of Blue", "Title": "Freddie Freeloader"},
        {"ID": "Q:0/3", "Creator": "Miles Davis", "Album": "Kind of Blue", "Title": "Blue in Green"},
    ]


@pytest.fixture
def tracks(queue_payload):
    return [TrackInfo.model_validate(item) for item in queue_payload]


@pytest.fixture
def position_payload():
    return {
        "Track": 2,
        "TrackDuration": 584,
        "RelTime": 61,
        "TrackURI": "x-file-cifs://nas/jazz/02.flac",
        "Title": "Freddie Freeloader",
        "Album": "Kind of Blue",
        "Creator": "Miles Davis",
    }


@pytest.fixture
def genres_payload():
    return [
        {"ID": "A:GENRE/Jazz", "ParentID": "A:GENRE", "Title": "Jazz"},
        {"ID": "A:GENRE/Rock", "ParentID": "A:GENRE", "Title": "Rock"},
    ]


@pytest.fixture
def device_responses(queue_payload, position_payload, genres_payload):
    """Canned replies of a healthy device playing track 2 of 3."""
    return {
        "get-volume": Success(value=35),
        "get-position-info": Success(value=position_payload),
        "get-transport-info": Success(
            value={"CurrentTransportState": "PLAYING", "CurrentTransportStatus": "OK", "CurrentSpeed": "1"}
        ),
        "get-queue-contents": Success(value=queue_payload),
        "get-all-genres": Success(value=genres_payload),
    }


@pytest.fixture
def fake_gateway(device_responses):
    return FakeGateway(device_responses)


@pytest.fixture
def store():
    return DeviceStateStore()


@pytest.fixture
def sync_loop(fake_gateway, store):
    """Sync loop wired to the fake gateway; the timer is never started."""
    return SyncLoop(fake_gateway, store, QueueWindow(), poll_interval=3600, queue_refresh_every=5)


@pytest.fixture
def library_browser(fake_gateway, store):
    return LibraryBrowser(fake_gateway, store, cache=SimpleCache(), cache_ttl_seconds=60)


@pytest.fixture
def panel_client(sync_loop, library_browser):
    """TestClient with the session objects overridden (no lifespan, no device)."""
    asyncio.run(sync_loop.refresh(include_queue=True, include_genres=True))
    fastapi_app.dependency_overrides[get_sync_loop] = lambda: sync_loop
    fastapi_app.dependency_overrides[get_library_browser] = lambda: library_browser
    client = TestClient(fastapi_app)
    yield client
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def test_client():
    """FastAPI test client with lifespan context (device unreachable)."""
    with TestClient(fastapi_app) as client:
        yield client


@pytest.fixture
def mock_http_client():
    """Mock httpx.AsyncClient for device calls."""
    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.post = AsyncMock()
    mock_client.aclose = AsyncMock()
    return mock_client


@pytest.fixture
def mock_settings():
    """Settings instance with test values."""
    return Settings(
        api_host="0.0.0.0",
        api_port=8000,
        device_base_url="http://192.168.1.20:8080/",
        poll_interval_seconds=1.5,
        queue_refresh_every=5,
    )
