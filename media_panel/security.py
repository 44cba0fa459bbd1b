"""Host and origin allow-lists for the panel.

The panel has no user authentication; it relies on being reachable only
from trusted hosts and origins on the local network.
"""

from media_panel.config import Settings


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def get_cors_origins(settings: Settings) -> list[str]:
    """Get allowed CORS origins from settings."""
    return _split(settings.cors_origins)


def get_trusted_hosts(settings: Settings) -> list[str]:
    """Get trusted Host header patterns from settings."""
    return _split(settings.trusted_hosts)
