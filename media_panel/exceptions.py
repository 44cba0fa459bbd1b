"""Custom exceptions for Media Panel with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    PANEL_ERROR = "PANEL_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Device errors
    DEVICE_ERROR = "DEVICE_ERROR"
    DEVICE_REMOTE_ERROR = "DEVICE_REMOTE_ERROR"
    DEVICE_TRANSPORT_ERROR = "DEVICE_TRANSPORT_ERROR"

    # Queue errors
    QUEUE_POSITION_INVALID = "QUEUE_POSITION_INVALID"
    QUEUE_CHANGED = "QUEUE_CHANGED"
    STALE_INDEX = "STALE_INDEX"


class PanelException(Exception):
    """Base exception for panel errors with HTTP status code support.

    All custom exceptions inherit from this class so the error handlers
    can turn them into consistent JSON responses.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PANEL_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize panel exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class DeviceException(PanelException):
    """Playback device errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DEVICE_ERROR,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)


class DeviceRemoteException(DeviceException):
    """The device answered with an Error envelope."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.DEVICE_REMOTE_ERROR,
            status_code=502,
            details=details,
        )


class DeviceTransportException(DeviceException):
    """The request to the device itself failed (timeout, refused, bad reply)."""

    def __init__(self, message: str = "Device unreachable", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code=ErrorCode.DEVICE_TRANSPORT_ERROR,
            status_code=503,
            details=details,
        )


class QueuePositionException(PanelException):
    """A display position does not map to a row of the last rendered queue."""

    def __init__(self, display_position: int, queue_size: int):
        super().__init__(
            f"No queue row at display position {display_position}",
            code=ErrorCode.QUEUE_POSITION_INVALID,
            status_code=404,
            details={"display_position": display_position, "queue_size": queue_size},
        )


class QueueChangedException(PanelException):
    """The queue shown to the user no longer matches the device queue."""

    def __init__(self, display_position: int, generation: int):
        super().__init__(
            "The queue changed since it was displayed, please try again",
            code=ErrorCode.QUEUE_CHANGED,
            status_code=409,
            details={"display_position": display_position, "generation": generation},
        )


class StaleIndexError(PanelException):
    """Anchor index outside the current queue bounds.

    Raised and handled inside the queue window; never reaches a client.
    """

    def __init__(self, anchor_index: int, queue_size: int):
        super().__init__(
            f"Anchor index {anchor_index} outside queue of size {queue_size}",
            code=ErrorCode.STALE_INDEX,
            status_code=500,
            details={"anchor_index": anchor_index, "queue_size": queue_size},
        )
