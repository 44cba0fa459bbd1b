"""Display-side models derived from the device snapshot."""

from pydantic import BaseModel, ConfigDict, Field

from media_panel.models.device import LibraryNode, TrackInfo, TransportState


class QueueRow(BaseModel):
    """One row of the rotated queue display.

    ``display_position`` is where the row is shown (1 is always the
    currently playing track); ``absolute_index`` is the 0-based position in
    the device queue that jump and remove commands must address.
    """

    model_config = ConfigDict(frozen=True)

    display_position: int = Field(ge=1)
    absolute_index: int = Field(ge=0)
    track: TrackInfo

    @property
    def queue_position(self) -> int:
        """1-based position as the device numbers its queue."""
        return self.absolute_index + 1


class NowPlaying(BaseModel):
    """Formatted values for the now-playing panel."""

    track_label: str = ""
    title: str = ""
    album: str = ""
    creator: str = ""
    track_duration: str = "0h0m0s"
    relative_time: str = "0h0m0s"
    remaining_time: str = "0h0m0s"
    progress_percent: float = 0.0


class PanelView(BaseModel):
    """Everything the HTML layer needs for one render."""

    volume: int | None = None
    transport_state: TransportState = TransportState.OTHER
    is_playing: bool = False
    toggle_label: str = "Play"
    toggle_icon: str = "play"
    now_playing: NowPlaying | None = None
    queue: list[QueueRow] = Field(default_factory=list)
    queue_generation: int = 0
    genres: list[LibraryNode] = Field(default_factory=list)
    last_error: str | None = None
