"""Media Panel models"""

from media_panel.models.base_models import (
    CommandResponse,
    DebugInfo,
    DetailedHealthResponse,
    HealthResponse,
    VolumeRequest,
)
from media_panel.models.device import (
    DeviceEnvelope,
    LibraryNode,
    PositionInfo,
    TrackInfo,
    TransportInfo,
    TransportState,
)
from media_panel.models.panel import NowPlaying, PanelView, QueueRow
from media_panel.models.result import CommandResult, Failure, Success

__all__ = [
    "CommandResponse",
    "CommandResult",
    "DebugInfo",
    "DetailedHealthResponse",
    "DeviceEnvelope",
    "Failure",
    "HealthResponse",
    "LibraryNode",
    "NowPlaying",
    "PanelView",
    "PositionInfo",
    "QueueRow",
    "Success",
    "TrackInfo",
    "TransportInfo",
    "TransportState",
    "VolumeRequest",
]
