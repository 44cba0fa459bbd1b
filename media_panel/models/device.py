"""Pydantic models for payloads returned by the playback device.

Validation aliases follow the device's wire names (``Creator``, ``RelTime``, ...);
models can also be built with, and always serialize to, the Python field names.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeviceEnvelope(BaseModel):
    """The ``{Error}`` / ``{Value}`` envelope wrapping every device reply."""

    model_config = ConfigDict(extra="ignore")

    error: str | None = Field(default=None, validation_alias="Error")
    value: Any = Field(default=None, validation_alias="Value")


class TrackInfo(BaseModel):
    """One entry of the play queue. Immutable once fetched."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(default="", validation_alias="ID")
    creator: str = Field(default="", validation_alias="Creator")
    album: str = Field(default="", validation_alias="Album")
    title: str = Field(default="", validation_alias="Title")
    parent_id: str | None = Field(default=None, validation_alias="ParentID")
    track_uri: str | None = Field(default=None, validation_alias="TrackURI")
    item_class: str | None = Field(default=None, validation_alias="Class")
    album_art_uri: str | None = Field(default=None, validation_alias="AlbumArtURI")
    original_track_number: str | None = Field(default=None, validation_alias="OriginalTrackNumber")


class LibraryNode(BaseModel):
    """A node of the library taxonomy (genre, artist, album or track)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias="ID")
    title: str = Field(default="", validation_alias="Title")
    parent_id: str | None = Field(default=None, validation_alias="ParentID")
    item_class: str | None = Field(default=None, validation_alias="Class")
    creator: str | None = Field(default=None, validation_alias="Creator")
    album: str | None = Field(default=None, validation_alias="Album")


class PositionInfo(BaseModel):
    """Playback position as reported by the device.

    ``track_index`` is 1-based exactly as the device delivers it; durations
    are in seconds.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    track_index: int = Field(default=0, ge=0, validation_alias="Track")
    track_duration: float = Field(default=0, ge=0, validation_alias="TrackDuration")
    relative_time: float = Field(default=0, ge=0, validation_alias="RelTime")
    title: str = Field(default="", validation_alias="Title")
    album: str = Field(default="", validation_alias="Album")
    creator: str = Field(default="", validation_alias="Creator")
    track_uri: str | None = Field(default=None, validation_alias="TrackURI")


class TransportState(str, Enum):
    """Coarse transport state used to pick the play/pause toggle."""

    STOPPED = "STOPPED"
    PAUSED = "PAUSED"
    PLAYING = "PLAYING"
    OTHER = "OTHER"

    @classmethod
    def from_device(cls, raw: str | None) -> "TransportState":
        """Map the device's ``CurrentTransportState`` string; unknown values become OTHER."""
        if raw == "STOPPED":
            return cls.STOPPED
        if raw == "PAUSED_PLAYBACK":
            return cls.PAUSED
        if raw == "PLAYING":
            return cls.PLAYING
        return cls.OTHER

    @property
    def is_playing(self) -> bool:
        return self is TransportState.PLAYING


class TransportInfo(BaseModel):
    """Raw ``get-transport-info`` payload."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    current_transport_state: str | None = Field(default=None, validation_alias="CurrentTransportState")
    current_transport_status: str | None = Field(default=None, validation_alias="CurrentTransportStatus")
    current_speed: str | None = Field(default=None, validation_alias="CurrentSpeed")

    @property
    def state(self) -> TransportState:
        return TransportState.from_device(self.current_transport_state)
