"""Playback control routes with support for JSON and HTML responses.

Every command goes through the sync loop, so a successful command is
followed by the same refresh as a poll tick. HTML callers (HTMX) always get
the refreshed fragment, with any device error shown in its error slot; JSON
callers get a structured error response instead.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Path, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from media_panel.dependencies import get_sync_loop
from media_panel.exceptions import QueueChangedException
from media_panel.models import CommandResponse, CommandResult, VolumeRequest
from media_panel.services.command_gateway import raise_for_failure
from media_panel.services.sync_loop import SyncLoop
from media_panel.views.template_renderer import TemplateRenderer

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

Format = Literal["json", "html"]


def _command_reply(
    request: Request,
    sync_loop: SyncLoop,
    result: CommandResult,
    command: str,
    format: Format,
    fragment: Literal["now_playing", "queue"] = "now_playing",
):
    if format == "html":
        if fragment == "queue":
            return TemplateRenderer.render_queue(request, sync_loop.view)
        return TemplateRenderer.render_now_playing(request, sync_loop.view)

    raise_for_failure(result, command)
    return CommandResponse(status="ok", command=command)


async def _queue_changed_reply(
    request: Request,
    sync_loop: SyncLoop,
    exc: QueueChangedException,
    command: str,
    format: Format,
):
    """Nothing was sent; HTML callers get the current queue with the error shown."""
    if format != "html":
        raise exc
    await sync_loop.store.record_error(exc.message, command)
    view = await sync_loop.derive()
    return TemplateRenderer.render_queue(request, view)


@router.get(
    "/state",
    summary="Get the derived panel state",
    responses={200: {"description": "Current PanelView or the now-playing fragment"}},
)
async def get_state(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="json", description="Response format"),
):
    """Return the state derived on the last tick. Does not contact the device."""
    if format == "html":
        return TemplateRenderer.render_now_playing(request, sync_loop.view)
    return sync_loop.view


@router.get("/queue", summary="Get the rotated play queue")
async def get_queue(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="json", description="Response format"),
):
    """Queue rows as last rendered, now-playing track first."""
    if format == "html":
        return TemplateRenderer.render_queue(request, sync_loop.view)
    return sync_loop.view.queue


@router.post("/play", summary="Resume playback")
async def play(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.play()
    return _command_reply(request, sync_loop, result, "play", format)


@router.post("/pause", summary="Pause playback")
async def pause(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.pause()
    return _command_reply(request, sync_loop, result, "pause", format)


@router.post(
    "/toggle",
    summary="Toggle play/pause",
    description="Pauses when the device reports PLAYING, otherwise starts playback.",
)
async def toggle(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.toggle_play()
    return _command_reply(request, sync_loop, result, "toggle", format)


@router.post("/stop", summary="Stop playback")
async def stop(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.stop_playback()
    return _command_reply(request, sync_loop, result, "stop", format)


@router.post("/next", summary="Skip to the next track")
async def next_track(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.next_track()
    return _command_reply(request, sync_loop, result, "next", format)


@router.post("/previous", summary="Go back to the previous track")
async def previous_track(
    request: Request,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    result = await sync_loop.previous_track()
    return _command_reply(request, sync_loop, result, "previous", format)


@router.post(
    "/volume",
    summary="Set the device volume",
    description="""
    Sets the master volume. The value is passed to the device as-is.

    **Rate Limited:** 120 requests/minute (slider drags fire often)
    """,
)
@limiter.limit("120/minute")
async def set_volume(
    request: Request,
    body: VolumeRequest,
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="json", description="Response format"),
):
    result = await sync_loop.set_volume(body.value)
    return _command_reply(request, sync_loop, result, "set-volume", format)


@router.post(
    "/queue/{display_position}/jump",
    summary="Play the queue row at a display position",
    responses={
        404: {"description": "No such row in the rendered queue"},
        409: {"description": "The queue changed since that render"},
    },
)
async def jump_to_track(
    request: Request,
    display_position: int = Path(..., ge=1, description="1-based row as displayed"),
    generation: int | None = Query(default=None, ge=1, description="Queue render the row was taken from"),
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    try:
        result = await sync_loop.jump_to_track(display_position, generation)
    except QueueChangedException as e:
        return await _queue_changed_reply(request, sync_loop, e, "seek", format)
    return _command_reply(request, sync_loop, result, "seek", format, fragment="queue")


@router.delete(
    "/queue/{display_position}",
    summary="Remove the queue row at a display position",
    description="""
    Removes the track shown at `display_position` from the device queue.

    **Rate Limited:** 30 requests/minute
    """,
    responses={
        404: {"description": "No such row in the rendered queue"},
        409: {"description": "The queue changed since that render"},
    },
)
@limiter.limit("30/minute")
async def remove_track(
    request: Request,
    display_position: int = Path(..., ge=1, description="1-based row as displayed"),
    generation: int | None = Query(default=None, ge=1, description="Queue render the row was taken from"),
    sync_loop: SyncLoop = Depends(get_sync_loop),
    format: Format = Query(default="html", description="Response format"),
):
    try:
        result = await sync_loop.remove_track(display_position, generation)
    except QueueChangedException as e:
        return await _queue_changed_reply(request, sync_loop, e, "remove-track-from-queue", format)
    return _command_reply(request, sync_loop, result, "remove-track-from-queue", format, fragment="queue")
