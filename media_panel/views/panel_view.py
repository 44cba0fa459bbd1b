"""Derive display values from a device snapshot."""

from media_panel.models.device import PositionInfo
from media_panel.models.panel import NowPlaying, PanelView, QueueRow
from media_panel.state_managers import DeviceSnapshot
from media_panel.utils.formatting import format_duration


def build_now_playing(position: PositionInfo, queue_size: int) -> NowPlaying:
    """Format the position info for the now-playing panel."""
    duration = position.track_duration
    elapsed = position.relative_time
    progress = 100 * (elapsed / duration) if duration > 0 else 0.0

    return NowPlaying(
        track_label=f"{position.track_index}/{queue_size}",
        title=position.title,
        album=position.album,
        creator=position.creator,
        track_duration=format_duration(duration),
        relative_time=format_duration(elapsed),
        remaining_time=format_duration(max(duration - elapsed, 0)),
        progress_percent=min(progress, 100.0),
    )


def build_panel_view(snapshot: DeviceSnapshot, rows: list[QueueRow], queue_generation: int = 0) -> PanelView:
    """Combine the snapshot and the rendered queue rows into one PanelView.

    ``queue_generation`` identifies the queue render the rows came from.
    """
    is_playing = snapshot.transport_state.is_playing
    now_playing = None
    if snapshot.position is not None:
        now_playing = build_now_playing(snapshot.position, snapshot.last_queue_size)

    return PanelView(
        volume=snapshot.volume,
        transport_state=snapshot.transport_state,
        is_playing=is_playing,
        # The toggle offers the opposite of the current state
        toggle_label="Pause" if is_playing else "Play",
        toggle_icon="pause" if is_playing else "play",
        now_playing=now_playing,
        queue=rows,
        queue_generation=queue_generation,
        genres=list(snapshot.genres),
        last_error=snapshot.last_error,
    )
