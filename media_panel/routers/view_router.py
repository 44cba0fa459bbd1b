"""Page/view routes for serving the panel page and its fragments."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from media_panel.dependencies import get_sync_loop
from media_panel.services.sync_loop import SyncLoop
from media_panel.views.template_renderer import TemplateRenderer

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, sync_loop: SyncLoop = Depends(get_sync_loop)):
    """Render the panel page."""
    return TemplateRenderer.render_index(request, sync_loop.view)


@router.get("/tiles/now-playing", response_class=HTMLResponse)
async def now_playing_tile(request: Request, sync_loop: SyncLoop = Depends(get_sync_loop)):
    """Render the now-playing fragment."""
    return TemplateRenderer.render_now_playing(request, sync_loop.view)


@router.get("/tiles/queue", response_class=HTMLResponse)
async def queue_tile(request: Request, sync_loop: SyncLoop = Depends(get_sync_loop)):
    """Render the queue fragment."""
    return TemplateRenderer.render_queue(request, sync_loop.view)


@router.get("/tiles/library", response_class=HTMLResponse)
async def library_tile(request: Request, sync_loop: SyncLoop = Depends(get_sync_loop)):
    """Render the genre list loaded at startup."""
    return TemplateRenderer.render_library(request, sync_loop.view.genres)
