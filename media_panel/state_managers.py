"""State managers for the session's mutable device state.

The store is the only holder of the last-known remote state. Every
``apply_*`` method takes the CommandResult of one device request and either
replaces its slice of state in one step or records the error and leaves the
slice alone. Applies are serialized with an asyncio.Lock.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from media_panel.logging_config import get_logger, log_with_context
from media_panel.models.device import LibraryNode, PositionInfo, TrackInfo, TransportInfo, TransportState
from media_panel.models.result import CommandResult, Failure

logger = get_logger(__name__)

_queue_adapter = TypeAdapter(list[TrackInfo])
_nodes_adapter = TypeAdapter(list[LibraryNode])


class StateManager(ABC):
    """Base class for all state managers.

    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


@dataclass
class SyncState:
    """Bookkeeping that drives windowing and poll frequency.

    Has no remote counterpart. ``current_track_index`` is 0-based.
    """

    current_track_index: int = 0
    last_queue_size: int = 0
    poll_count: int = 0


class DeviceSnapshot(BaseModel):
    """Read-only copy of the store handed to the derive step."""

    volume: int | None = None
    transport_state: TransportState = TransportState.OTHER
    position: PositionInfo | None = None
    queue: tuple[TrackInfo, ...] = ()
    genres: tuple[LibraryNode, ...] = ()
    last_error: str | None = None
    current_track_index: int = 0
    last_queue_size: int = 0
    poll_count: int = 0


class DeviceStateStore(StateManager):
    """Last-known snapshot of the device: volume, transport, position, queue.

    Also owns the session's SyncState and the single last-error slot. Each
    failure overwrites the slot. A successful reply clears it, except inside
    a poll refresh, which clears it only when none of its replies failed.
    """

    def __init__(self):
        """Initialize an empty store."""
        self.volume: int | None = None
        self.transport_state: TransportState = TransportState.OTHER
        self.position: PositionInfo | None = None
        self.queue: tuple[TrackInfo, ...] = ()
        self.genres: tuple[LibraryNode, ...] = ()
        self.last_error: str | None = None
        self.last_success_at: float | None = None
        self.error_count = 0
        self.sync_state = SyncState()
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Nothing to load; the first refresh fills the store."""
        pass

    async def cleanup(self) -> None:
        """Forget everything learned during the session."""
        async with self._lock:
            self.volume = None
            self.transport_state = TransportState.OTHER
            self.position = None
            self.queue = ()
            self.genres = ()
            self.last_error = None
            self.last_success_at = None
            self.error_count = 0
            self.sync_state = SyncState()

    @property
    def is_playing(self) -> bool:
        return self.transport_state.is_playing

    async def apply_volume(self, result: CommandResult, clear_error: bool = True) -> bool:
        """Apply a ``get-volume`` reply.

        Args:
            result: Gateway result
            clear_error: Clear the last-error slot on success. A poll refresh
                passes False and settles the slot once all its replies are in.

        Returns:
            True if the volume slice was replaced
        """
        async with self._lock:
            value = self._accept(result, "get-volume", clear_error)
            if value is None:
                return False
            try:
                volume = int(value)
            except (TypeError, ValueError):
                self._record_error(f"Malformed get-volume reply: {value!r}", "get-volume")
                return False
            self.volume = volume
            return True

    async def apply_transport_info(self, result: CommandResult, clear_error: bool = True) -> bool:
        """Apply a ``get-transport-info`` reply."""
        async with self._lock:
            value = self._accept(result, "get-transport-info", clear_error)
            if value is None:
                return False
            try:
                info = TransportInfo.model_validate(value)
            except ValidationError as e:
                self._record_error(f"Malformed get-transport-info reply: {e.error_count()} errors", "get-transport-info")
                return False
            self.transport_state = info.state
            return True

    async def apply_position_info(self, result: CommandResult, clear_error: bool = True) -> bool:
        """Apply a ``get-position-info`` reply.

        Also moves the 0-based anchor (``sync_state.current_track_index``)
        so that any queue render derived afterwards sees the new track.
        """
        async with self._lock:
            value = self._accept(result, "get-position-info", clear_error)
            if value is None:
                return False
            try:
                position = PositionInfo.model_validate(value)
            except ValidationError as e:
                self._record_error(f"Malformed get-position-info reply: {e.error_count()} errors", "get-position-info")
                return False
            self.position = position
            self.sync_state.current_track_index = max(position.track_index - 1, 0)
            return True

    async def apply_queue(self, result: CommandResult, clear_error: bool = True) -> bool:
        """Apply a ``get-queue-contents`` reply, replacing the whole queue."""
        async with self._lock:
            value = self._accept(result, "get-queue-contents", clear_error)
            if value is None:
                return False
            try:
                queue = tuple(_queue_adapter.validate_python(value))
            except ValidationError as e:
                self._record_error(f"Malformed get-queue-contents reply: {e.error_count()} errors", "get-queue-contents")
                return False
            self.queue = queue
            self.sync_state.last_queue_size = len(queue)
            return True

    async def apply_genres(self, result: CommandResult, clear_error: bool = True) -> bool:
        """Apply a ``get-all-genres`` reply."""
        async with self._lock:
            value = self._accept(result, "get-all-genres", clear_error)
            if value is None:
                return False
            try:
                genres = tuple(_nodes_adapter.validate_python(value))
            except ValidationError as e:
                self._record_error(f"Malformed get-all-genres reply: {e.error_count()} errors", "get-all-genres")
                return False
            self.genres = genres
            return True

    async def apply_command(self, result: CommandResult, command: str) -> bool:
        """Record the outcome of a command that carries no state (seek, set-volume, ...).

        Returns:
            True if the command succeeded
        """
        async with self._lock:
            if isinstance(result, Failure):
                self._record_error(result.message, command)
                return False
            self._record_success()
            return True

    async def clear_error(self) -> None:
        """Empty the last-error slot after a refresh in which nothing failed."""
        async with self._lock:
            self.last_error = None

    async def record_error(self, message: str, source: str) -> None:
        """Put a message in the last-error slot without touching any state."""
        async with self._lock:
            self._record_error(message, source)

    async def next_poll(self) -> int:
        """Count one timer tick and return the new poll count."""
        async with self._lock:
            self.sync_state.poll_count += 1
            return self.sync_state.poll_count

    async def snapshot(self) -> DeviceSnapshot:
        """Copy the current state for the derive step."""
        async with self._lock:
            sync_state = replace(self.sync_state)
            return DeviceSnapshot(
                volume=self.volume,
                transport_state=self.transport_state,
                position=self.position,
                queue=self.queue,
                genres=self.genres,
                last_error=self.last_error,
                current_track_index=sync_state.current_track_index,
                last_queue_size=sync_state.last_queue_size,
                poll_count=sync_state.poll_count,
            )

    def _accept(self, result: CommandResult, source: str, clear_error: bool = True) -> Any | None:
        """Common failure/empty handling; returns the payload to decode or None."""
        if isinstance(result, Failure):
            self._record_error(result.message, source)
            return None
        if clear_error:
            self._record_success()
        else:
            self.last_success_at = time.time()
        return result.value

    def _record_error(self, message: str, source: str) -> None:
        self.last_error = message
        self.error_count += 1
        log_with_context(
            logger,
            "warning",
            "Device state update failed",
            source=source,
            error=message,
            event_type="state_apply_error",
        )

    def _record_success(self) -> None:
        self.last_error = None
        self.last_success_at = time.time()
