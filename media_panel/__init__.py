"""Media Panel - web control panel for a networked playback device"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("media-panel")
except PackageNotFoundError:
    __version__ = "dev"
