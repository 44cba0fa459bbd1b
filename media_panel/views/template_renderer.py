"""Template rendering utilities for HTML views."""

from datetime import datetime
from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from media_panel.models.device import LibraryNode
from media_panel.models.panel import PanelView

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)


class TemplateRenderer:
    """Handles rendering of Jinja2 templates for all panel views.

    Every method takes an already derived PanelView; nothing here talks to
    the device.
    """

    @staticmethod
    def render_index(request: Request, view: PanelView) -> HTMLResponse:
        """Render the full panel page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "view": view,
                "now_playing": view.now_playing,
                "last_updated": datetime.now().strftime("%H:%M:%S"),
                "rows": view.queue,
                "generation": view.queue_generation,
                "last_error": None,
                "nodes": view.genres,
                "root": None,
                "error": None,
            },
        )

    @staticmethod
    def render_now_playing(request: Request, view: PanelView) -> HTMLResponse:
        """Render the now-playing fragment (position, transport toggle, volume, error slot).

        Args:
            request: FastAPI request object
            view: Current derived view

        Returns:
            HTMLResponse with the rendered fragment
        """
        return templates.TemplateResponse(
            request,
            "tiles/now_playing.html",
            {
                "view": view,
                "now_playing": view.now_playing,
                "last_updated": datetime.now().strftime("%H:%M:%S"),
            },
        )

    @staticmethod
    def render_queue(request: Request, view: PanelView) -> HTMLResponse:
        """Render the rotated queue table.

        Jump/remove links carry display positions plus the generation of
        this render; the server resolves them against that render.
        """
        return templates.TemplateResponse(
            request,
            "tiles/queue.html",
            {"rows": view.queue, "generation": view.queue_generation, "last_error": view.last_error},
        )

    @staticmethod
    def render_library(
        request: Request,
        nodes: list[LibraryNode],
        root: str | None = None,
        error: str | None = None,
    ) -> HTMLResponse:
        """Render one level of the library tree."""
        return templates.TemplateResponse(
            request,
            "tiles/library.html",
            {"nodes": nodes, "root": root, "error": error},
        )
