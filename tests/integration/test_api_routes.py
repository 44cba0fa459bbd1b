"""Integration tests for API routes against the full application lifespan.

The configured device address has nothing listening on it, so every device
request fails with a transport error; the panel must keep serving anyway.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from media_panel.main import app


@pytest.mark.asyncio
async def test_health_endpoint():
    """Test health check endpoint."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        response = await ac.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


def test_liveness(test_client):
    response = test_client.get("/health/live")

    assert response.status_code == 200
    assert response.json()["status"] == "alive"


def test_readiness_reports_unreachable_device(test_client):
    """Test the readiness check fails while the device cannot be reached."""
    response = test_client.get("/health/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unhealthy"
    assert data["checks"]["http_client"] == "ok"
    assert data["checks"]["sync_loop"] == "ok"
    assert data["checks"]["device"].startswith("failed")


def test_index_renders_with_unreachable_device(test_client):
    """Test the page still renders and shows the transport error."""
    response = test_client.get("/")

    assert response.status_code == 200
    assert "<title>Media Panel</title>" in response.text
    assert "Error in call to" in response.text
    assert "The queue is empty." in response.text


def test_state_after_failed_initial_load(test_client):
    response = test_client.get("/api/player/state")

    assert response.status_code == 200
    data = response.json()
    assert data["volume"] is None
    assert data["queue"] == []
    assert data["toggle_label"] == "Play"
    assert data["last_error"].startswith("Error in call to")


def test_command_against_unreachable_device(test_client):
    response = test_client.post("/api/player/play?format=json")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "DEVICE_TRANSPORT_ERROR"


def test_jump_with_empty_queue_is_not_found(test_client):
    response = test_client.post("/api/player/queue/1/jump?format=json")

    assert response.status_code == 404
    assert response.json()["error"]["details"] == {"display_position": 1, "queue_size": 0}


def test_library_html_shows_device_error(test_client):
    response = test_client.get("/api/library/genres?format=html")

    assert response.status_code == 200
    assert "Error in call to get-all-genres" in response.text


def test_debug_endpoint(test_client):
    response = test_client.get("/debug")

    assert response.status_code == 200
    data = response.json()
    assert data["state"]["sync_loop"] == "polling"
    assert data["state"]["timer_running"] is True
    assert data["state"]["poll_count"] == 0
    assert data["config"]["device_base_url"] == "http://127.0.0.1:9"
    assert data["config"]["queue_refresh_every"] == 5


def test_openapi_hides_fragment_routes(test_client):
    schema = test_client.get("/openapi.json").json()

    assert "/api/player/state" in schema["paths"]
    assert not any(path.startswith("/tiles/") for path in schema["paths"])


def test_untrusted_host_rejected(test_client):
    response = test_client.get("/health", headers={"host": "evil.example.com"})

    assert response.status_code == 400
