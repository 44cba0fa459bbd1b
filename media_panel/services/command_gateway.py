"""Single chokepoint for every request sent to the playback device.

Each call posts a form-encoded ``method=<command>`` request to one of the two
device endpoints and decodes the ``{Error}`` / ``{Value}`` envelope into a
``Success`` or ``Failure``. Transport problems are folded into the same
result type; nothing is raised past the caller and nothing is retried.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from media_panel.exceptions import DeviceRemoteException, DeviceTransportException, ErrorCode
from media_panel.logging_config import get_logger, log_with_context
from media_panel.models.device import DeviceEnvelope
from media_panel.models.result import CommandResult, Failure, Success

logger = get_logger(__name__)


class Endpoint(str, Enum):
    """The two request endpoints exposed by the device."""

    CONTROL = "control"
    BROWSE = "browse"


class Command(str, Enum):
    """Canonical command names understood by the device."""

    GET_VOLUME = "get-volume"
    SET_VOLUME = "set-volume"
    GET_POSITION_INFO = "get-position-info"
    GET_TRANSPORT_INFO = "get-transport-info"
    SEEK = "seek"
    REMOVE_TRACK_FROM_QUEUE = "remove-track-from-queue"
    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    NEXT = "next"
    PREVIOUS = "previous"
    GET_QUEUE_CONTENTS = "get-queue-contents"
    GET_ALL_GENRES = "get-all-genres"
    GET_DIRECT_CHILDREN = "get-direct-children"


ENDPOINT_FOR_COMMAND: dict[Command, Endpoint] = {
    Command.GET_QUEUE_CONTENTS: Endpoint.BROWSE,
    Command.GET_ALL_GENRES: Endpoint.BROWSE,
    Command.GET_DIRECT_CHILDREN: Endpoint.BROWSE,
}


def decode_envelope(payload: Any) -> CommandResult:
    """Turn a decoded JSON reply into a tagged result.

    ``Error`` wins over ``Value``; a reply carrying neither is an empty
    success.
    """
    if not isinstance(payload, dict):
        return Failure(
            message="Malformed reply from device: expected a JSON object",
            code=ErrorCode.DEVICE_TRANSPORT_ERROR,
        )
    try:
        envelope = DeviceEnvelope.model_validate(payload)
    except ValidationError as e:
        return Failure(message=f"Malformed reply from device: {e}", code=ErrorCode.DEVICE_TRANSPORT_ERROR)

    if envelope.error is not None:
        return Failure(message=envelope.error, code=ErrorCode.DEVICE_REMOTE_ERROR)
    return Success(value=envelope.value)


class CommandGateway:
    """Sends named commands to the device and resolves with a CommandResult."""

    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float = 5.0):
        """Initialize the gateway.

        Args:
            client: Shared HTTP client from the application lifespan
            base_url: Device API base URL without trailing slash
            timeout: Per-request timeout in seconds
        """
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    async def send(
        self,
        command: Command | str,
        params: Mapping[str, Any] | None = None,
        endpoint: Endpoint | None = None,
    ) -> CommandResult:
        """Send one command and decode the reply.

        Args:
            command: Command name (e.g. ``get-volume``)
            params: Extra form fields for the command
            endpoint: Override for the endpoint; by default browse commands go
                to ``/browse`` and everything else to ``/control``

        Returns:
            Success with the reply's Value, or Failure with a message
        """
        command = Command(command)
        if endpoint is None:
            endpoint = ENDPOINT_FOR_COMMAND.get(command, Endpoint.CONTROL)

        form = {"method": command.value}
        for key, value in (params or {}).items():
            form[key] = str(value)

        url = f"{self._base_url}/{endpoint.value}"
        try:
            response = await self._client.post(url, data=form, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as e:
            return self._transport_failure(command, f"Timed out waiting for device ({type(e).__name__})")
        except httpx.HTTPStatusError as e:
            return self._transport_failure(command, f"Device returned HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            return self._transport_failure(command, f"Could not reach device: {e}")
        except ValueError as e:
            return self._transport_failure(command, f"Device reply is not valid JSON: {e}")

        result = decode_envelope(payload)
        if isinstance(result, Failure):
            log_with_context(
                logger,
                "warning",
                "Device reported an error",
                command=command.value,
                endpoint=endpoint.value,
                error=result.message,
                event_type="device_remote_error",
            )
        else:
            log_with_context(
                logger,
                "debug",
                "Device command succeeded",
                command=command.value,
                endpoint=endpoint.value,
                event_type="device_command_ok",
            )
        return result

    def _transport_failure(self, command: Command, message: str) -> Failure:
        log_with_context(
            logger,
            "warning",
            "Device request failed",
            command=command.value,
            error=message,
            event_type="device_transport_error",
        )
        return Failure(message=f"Error in call to {command.value}: {message}", code=ErrorCode.DEVICE_TRANSPORT_ERROR)


def raise_for_failure(result: CommandResult, command: str) -> Any:
    """Return the value of a Success, or raise the matching DeviceException.

    Used at the HTTP boundary where a failed command has to become an error
    response.

    Raises:
        DeviceRemoteException: The device answered with an Error envelope
        DeviceTransportException: The device could not be reached
    """
    if isinstance(result, Success):
        return result.value
    details = {"command": command}
    if result.code == ErrorCode.DEVICE_TRANSPORT_ERROR:
        raise DeviceTransportException(result.message, details=details)
    raise DeviceRemoteException(result.message, details=details)
