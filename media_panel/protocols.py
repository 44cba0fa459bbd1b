"""Protocol definitions for dependency injection."""

from collections.abc import Mapping
from typing import Any, Protocol

from media_panel.models.result import CommandResult


class CommandGatewayProtocol(Protocol):
    """Protocol for anything that can deliver a command to the device.

    The sync loop and the library browser only depend on this interface,
    which lets tests swap in a recording fake for the HTTP gateway.
    """

    async def send(
        self,
        command: Any,
        params: Mapping[str, Any] | None = None,
        endpoint: Any = None,
    ) -> CommandResult:
        """Send one command.

        Args:
            command: Command name
            params: Extra command parameters
            endpoint: Optional endpoint override

        Returns:
            Tagged Success or Failure result
        """
        ...
