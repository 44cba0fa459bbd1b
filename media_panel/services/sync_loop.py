"""State-synchronization loop between the device and the panel.

One asyncio task polls the device on a fixed interval. Every tick refreshes
volume, position and transport state; the queue, which is much more
expensive to fetch and render, is refreshed only on every N-th tick. The
sub-requests of a tick run concurrently and fail independently.

User commands go through the same gateway and, once the device accepts
them, trigger the same refresh/derive path as a tick, so the panel never
shows something a later poll would contradict.
"""

import asyncio
from collections.abc import Mapping
from enum import Enum
from typing import Any

from media_panel.exceptions import QueueChangedException
from media_panel.logging_config import get_logger, log_with_context
from media_panel.models.panel import PanelView
from media_panel.models.result import CommandResult
from media_panel.protocols import CommandGatewayProtocol
from media_panel.services.command_gateway import Command
from media_panel.services.queue_window import QueueWindow
from media_panel.state_managers import DeviceStateStore
from media_panel.views.panel_view import build_panel_view

logger = get_logger(__name__)


class LoopState(str, Enum):
    """Lifecycle of the loop. IDLE only until the first initialize()."""

    IDLE = "idle"
    POLLING = "polling"


class SyncLoop:
    """Polls the device and keeps the derived PanelView current."""

    def __init__(
        self,
        gateway: CommandGatewayProtocol,
        store: DeviceStateStore,
        window: QueueWindow,
        poll_interval: float = 2.0,
        queue_refresh_every: int = 5,
    ):
        """Initialize the loop.

        Args:
            gateway: Where every device request goes
            store: Session state store
            window: Queue window holding the last rendered mapping
            poll_interval: Seconds between two ticks
            queue_refresh_every: Fetch the queue on every N-th tick
        """
        if queue_refresh_every < 1:
            raise ValueError("queue_refresh_every must be at least 1")
        self._gateway = gateway
        self._store = store
        self._window = window
        self._poll_interval = poll_interval
        self._queue_refresh_every = queue_refresh_every
        self._view = PanelView()
        self._task: asyncio.Task | None = None
        self._stopping = asyncio.Event()
        self.state = LoopState.IDLE

    @property
    def view(self) -> PanelView:
        """The PanelView produced by the most recent derive."""
        return self._view

    @property
    def store(self) -> DeviceStateStore:
        return self._store

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def initialize(self, start_timer: bool = True) -> PanelView:
        """Do one full refresh (including queue and genres) and start polling."""
        log_with_context(
            logger,
            "info",
            "Initial device refresh",
            poll_interval=self._poll_interval,
            queue_refresh_every=self._queue_refresh_every,
            event_type="sync_initialize",
        )
        view = await self.refresh(include_queue=True, include_genres=True)
        if start_timer:
            self.start()
        self.state = LoopState.POLLING
        return view

    def start(self) -> None:
        """Start the timer task if it is not already running."""
        if self.is_running:
            return
        self._stopping.clear()
        self._task = asyncio.create_task(self._run(), name="media-panel-sync-loop")
        self.state = LoopState.POLLING

    async def stop(self) -> None:
        """Stop scheduling ticks. A tick already in flight runs to completion."""
        self._stopping.set()
        if self._task is not None:
            await self._task
            self._task = None
        log_with_context(logger, "info", "Sync loop stopped", event_type="sync_stopped")

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._poll_interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.tick()
            except Exception as e:
                # A broken tick must not end polling for the session
                log_with_context(
                    logger,
                    "error",
                    "Poll tick failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="sync_tick_error",
                )
                logger.error("Poll tick traceback:", exc_info=True)

    async def tick(self) -> PanelView:
        """Run one poll iteration."""
        poll_count = await self._store.next_poll()
        include_queue = poll_count % self._queue_refresh_every == 0
        log_with_context(
            logger,
            "debug",
            "Poll tick",
            poll_count=poll_count,
            include_queue=include_queue,
            event_type="sync_tick",
        )
        return await self.refresh(include_queue=include_queue)

    async def refresh(self, include_queue: bool = False, include_genres: bool = False) -> PanelView:
        """Fetch state from the device concurrently, apply it, then derive.

        The last-error slot keeps the newest failure of this refresh and is
        cleared only when every sub-request succeeded.
        """
        requests = [
            self._refresh_volume(),
            self._refresh_position(),
            self._refresh_transport(),
        ]
        if include_queue:
            requests.append(self._refresh_queue())
        if include_genres:
            requests.append(self._refresh_genres())

        errors_before = self._store.error_count
        await asyncio.gather(*requests)
        # A sibling's success never clears a failure from the same refresh
        if self._store.error_count == errors_before:
            await self._store.clear_error()
        return await self.derive()

    async def derive(self) -> PanelView:
        """Rebuild the queue window and the PanelView from the store."""
        snapshot = await self._store.snapshot()
        rows = self._window.update(snapshot.queue, snapshot.current_track_index)
        self._view = build_panel_view(snapshot, rows, queue_generation=self._window.generation)
        return self._view

    async def _refresh_volume(self) -> None:
        await self._store.apply_volume(await self._gateway.send(Command.GET_VOLUME), clear_error=False)

    async def _refresh_position(self) -> None:
        await self._store.apply_position_info(await self._gateway.send(Command.GET_POSITION_INFO), clear_error=False)

    async def _refresh_transport(self) -> None:
        await self._store.apply_transport_info(await self._gateway.send(Command.GET_TRANSPORT_INFO), clear_error=False)

    async def _refresh_queue(self) -> None:
        await self._store.apply_queue(await self._gateway.send(Command.GET_QUEUE_CONTENTS), clear_error=False)

    async def _refresh_genres(self) -> None:
        await self._store.apply_genres(await self._gateway.send(Command.GET_ALL_GENRES), clear_error=False)

    # User commands

    async def jump_to_track(self, display_position: int, generation: int | None = None) -> CommandResult:
        """Start playing the track shown at ``display_position``.

        Args:
            display_position: 1-based row as displayed
            generation: Queue render the row was taken from (current one if None)

        Raises:
            QueuePositionException: If the position is not on screen
            QueueChangedException: If that render no longer matches the queue
        """
        absolute_index = self._resolve(display_position, generation)
        return await self._dispatch(Command.SEEK, {"unit": "TRACK_NR", "target": absolute_index + 1})

    async def remove_track(self, display_position: int, generation: int | None = None) -> CommandResult:
        """Remove the track shown at ``display_position`` from the device queue.

        Raises:
            QueuePositionException: If the position is not on screen
            QueueChangedException: If that render no longer matches the queue
        """
        absolute_index = self._resolve(display_position, generation)
        return await self._dispatch(Command.REMOVE_TRACK_FROM_QUEUE, {"track": absolute_index + 1})

    async def set_volume(self, value: int) -> CommandResult:
        return await self._dispatch(Command.SET_VOLUME, {"value": value})

    async def play(self) -> CommandResult:
        return await self._dispatch(Command.PLAY)

    async def pause(self) -> CommandResult:
        return await self._dispatch(Command.PAUSE)

    async def stop_playback(self) -> CommandResult:
        return await self._dispatch(Command.STOP)

    async def next_track(self) -> CommandResult:
        return await self._dispatch(Command.NEXT)

    async def previous_track(self) -> CommandResult:
        return await self._dispatch(Command.PREVIOUS)

    async def toggle_play(self) -> CommandResult:
        """Pause when the device is playing, otherwise play."""
        if self._store.is_playing:
            return await self.pause()
        return await self.play()

    def _resolve(self, display_position: int, generation: int | None) -> int:
        row = self._window.row_at(display_position, generation)
        if generation is not None:
            # The device queue may have been refetched since that render
            queue = self._store.queue
            if row.absolute_index >= len(queue) or queue[row.absolute_index] != row.track:
                raise QueueChangedException(display_position, generation)
        return row.absolute_index

    async def _dispatch(self, command: Command, params: Mapping[str, Any] | None = None) -> CommandResult:
        log_with_context(
            logger,
            "info",
            "User command",
            command=command.value,
            params=dict(params or {}),
            event_type="user_command",
        )
        result = await self._gateway.send(command, params)
        if await self._store.apply_command(result, command.value):
            await self.refresh(include_queue=True)
        else:
            await self.derive()
        return result
