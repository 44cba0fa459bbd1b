"""Main FastAPI application entry point."""

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi.responses import Response

from media_panel.core.app_factory import create_app
from media_panel.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

setup_logging(os.getenv("LOG_LEVEL", "INFO"))

app = create_app()


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    """Return empty favicon to prevent 404 errors."""
    return Response(content=b"", media_type="image/x-icon")


def run() -> None:
    """Console entry point: serve the panel with uvicorn."""
    import uvicorn

    from media_panel.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "media_panel.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
