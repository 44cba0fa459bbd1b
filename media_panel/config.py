from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parent.parent  # media-panel/


class Settings(BaseSettings):
    """Application settings with validation.

    Values come from environment variables or the .env file in the project
    root. Only the device address is required; everything else has a
    working default for a panel served on the local network.
    """

    # Panel web server
    api_host: str = Field(default="127.0.0.1", min_length=1, description="Panel server host (e.g., '0.0.0.0')")
    api_port: int = Field(ge=1, le=65535, default=8000, description="Panel server port")

    # Playback device
    device_base_url: str = Field(
        description="Base URL of the device control API (e.g., 'http://192.168.1.20:8080')",
    )
    device_timeout_seconds: float = Field(gt=0, default=5.0, description="Per-request timeout towards the device")

    # Synchronization loop
    poll_interval_seconds: float = Field(gt=0, default=2.0, description="Seconds between two poll ticks")
    queue_refresh_every: int = Field(ge=1, default=5, description="Fetch the queue on every N-th tick")

    # Library browsing
    library_cache_ttl_seconds: int = Field(ge=0, default=60, description="How long library listings stay cached")

    # Security
    cors_origins: str = Field(
        default="http://localhost:8000,http://127.0.0.1:8000",
        description="Comma-separated list of allowed CORS origins",
    )
    trusted_hosts: str = Field(
        default="localhost,127.0.0.1",
        description="Comma-separated list of trusted Host header values",
    )

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("api_host", mode="after")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Ensure api_host is not empty or whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_host cannot be empty")
        return v

    @field_validator("device_base_url", mode="after")
    @classmethod
    def validate_device_base_url(cls, v: str) -> str:
        """Strip whitespace and the trailing slash so endpoint paths join cleanly."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("device_base_url must be a valid http:// or https:// URL")
        return v


_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    The singleton avoids re-reading the .env file on every request.

    Example:
        @app.get("/")
        async def route(settings: Settings = Depends(get_settings)):
            return {"device": settings.device_base_url}
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
