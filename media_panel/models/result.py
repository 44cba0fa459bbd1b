"""Tagged result of a single device command."""

from typing import Any, Literal

from pydantic import BaseModel

from media_panel.exceptions import ErrorCode


class Success(BaseModel):
    """The device accepted the command. ``value`` is None for an empty reply."""

    ok: Literal[True] = True
    value: Any = None


class Failure(BaseModel):
    """The device reported an error, or the request never got an answer."""

    ok: Literal[False] = False
    message: str
    code: ErrorCode = ErrorCode.DEVICE_REMOTE_ERROR


CommandResult = Success | Failure
