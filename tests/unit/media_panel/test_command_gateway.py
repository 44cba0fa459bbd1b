"""Unit tests for the device command gateway."""

from unittest.mock import MagicMock

import httpx
import pytest

from media_panel.exceptions import DeviceRemoteException, DeviceTransportException, ErrorCode
from media_panel.models import Failure, Success
from media_panel.services.command_gateway import (
    Command,
    CommandGateway,
    Endpoint,
    decode_envelope,
    raise_for_failure,
)


def _response(payload):
    response = MagicMock()
    response.status_code = 200
    response.json = lambda: payload
    response.raise_for_status = lambda: None
    return response


def test_decode_value_is_success():
    assert decode_envelope({"Value": 42}) == Success(value=42)


def test_decode_error_is_remote_failure():
    result = decode_envelope({"Error": "Error in call to seek: invalid target"})

    assert isinstance(result, Failure)
    assert result.message == "Error in call to seek: invalid target"
    assert result.code == ErrorCode.DEVICE_REMOTE_ERROR


def test_decode_error_wins_over_value():
    result = decode_envelope({"Error": "boom", "Value": 1})

    assert isinstance(result, Failure)


def test_decode_empty_envelope_is_empty_success():
    assert decode_envelope({}) == Success(value=None)


def test_decode_non_object_is_transport_failure():
    result = decode_envelope(["not", "an", "envelope"])

    assert isinstance(result, Failure)
    assert result.code == ErrorCode.DEVICE_TRANSPORT_ERROR


@pytest.mark.asyncio
async def test_send_posts_form_to_control_endpoint(mock_http_client):
    mock_http_client.post.return_value = _response({"Value": True})
    gateway = CommandGateway(mock_http_client, "http://192.168.1.20:8080/", timeout=2.0)

    result = await gateway.send(Command.SEEK, {"unit": "TRACK_NR", "target": 3})

    assert result == Success(value=True)
    mock_http_client.post.assert_called_once_with(
        "http://192.168.1.20:8080/control",
        data={"method": "seek", "unit": "TRACK_NR", "target": "3"},
        timeout=2.0,
    )


@pytest.mark.asyncio
async def test_send_routes_browse_commands(mock_http_client):
    mock_http_client.post.return_value = _response({"Value": []})
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    await gateway.send("get-queue-contents")
    await gateway.send(Command.GET_DIRECT_CHILDREN, {"root": "A:GENRE/Jazz"})

    urls = [call.args[0] for call in mock_http_client.post.call_args_list]
    assert urls == ["http://device:8080/browse", "http://device:8080/browse"]


@pytest.mark.asyncio
async def test_send_endpoint_override(mock_http_client):
    mock_http_client.post.return_value = _response({"Value": 10})
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    await gateway.send(Command.GET_VOLUME, endpoint=Endpoint.BROWSE)

    assert mock_http_client.post.call_args.args[0] == "http://device:8080/browse"


@pytest.mark.asyncio
async def test_send_returns_remote_failure(mock_http_client):
    mock_http_client.post.return_value = _response({"Error": "No such method control::bogus"})
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    result = await gateway.send(Command.PLAY)

    assert isinstance(result, Failure)
    assert result.message == "No such method control::bogus"


@pytest.mark.asyncio
async def test_connection_error_becomes_transport_failure(mock_http_client):
    mock_http_client.post.side_effect = httpx.ConnectError("Connection refused")
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    result = await gateway.send(Command.GET_VOLUME)

    assert isinstance(result, Failure)
    assert result.code == ErrorCode.DEVICE_TRANSPORT_ERROR
    assert "get-volume" in result.message


@pytest.mark.asyncio
async def test_timeout_becomes_transport_failure(mock_http_client):
    mock_http_client.post.side_effect = httpx.ReadTimeout("timed out")
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    result = await gateway.send(Command.GET_POSITION_INFO)

    assert isinstance(result, Failure)
    assert result.code == ErrorCode.DEVICE_TRANSPORT_ERROR
    assert "Timed out" in result.message


@pytest.mark.asyncio
async def test_http_status_error_becomes_transport_failure(mock_http_client):
    response = MagicMock()
    response.status_code = 500
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "Server error", request=MagicMock(), response=response
    )
    mock_http_client.post.return_value = response
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    result = await gateway.send(Command.GET_VOLUME)

    assert isinstance(result, Failure)
    assert "HTTP 500" in result.message


@pytest.mark.asyncio
async def test_invalid_json_becomes_transport_failure(mock_http_client):
    response = MagicMock()
    response.raise_for_status = lambda: None
    response.json.side_effect = ValueError("Expecting value")
    mock_http_client.post.return_value = response
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    result = await gateway.send(Command.GET_VOLUME)

    assert isinstance(result, Failure)
    assert result.code == ErrorCode.DEVICE_TRANSPORT_ERROR


@pytest.mark.asyncio
async def test_send_makes_exactly_one_attempt(mock_http_client):
    mock_http_client.post.side_effect = httpx.ConnectError("Connection refused")
    gateway = CommandGateway(mock_http_client, "http://device:8080")

    await gateway.send(Command.SET_VOLUME, {"value": 20})

    assert mock_http_client.post.call_count == 1


def test_raise_for_failure_passes_value_through():
    assert raise_for_failure(Success(value=7), "get-volume") == 7


def test_raise_for_failure_remote():
    with pytest.raises(DeviceRemoteException) as exc_info:
        raise_for_failure(Failure(message="nope"), "seek")

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"command": "seek"}


def test_raise_for_failure_transport():
    with pytest.raises(DeviceTransportException) as exc_info:
        raise_for_failure(Failure(message="down", code=ErrorCode.DEVICE_TRANSPORT_ERROR), "play")

    assert exc_info.value.status_code == 503
