"""Library browsing routes (genre -> artist -> album -> track)."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request

from media_panel.dependencies import get_library_browser
from media_panel.exceptions import DeviceException
from media_panel.models import LibraryNode
from media_panel.services.library_browser import LibraryBrowser
from media_panel.views.template_renderer import TemplateRenderer

router = APIRouter()

Format = Literal["json", "html"]


@router.get(
    "/genres",
    summary="List library genres",
    responses={502: {"description": "Device reported an error"}, 503: {"description": "Device unreachable"}},
)
async def list_genres(
    request: Request,
    browser: LibraryBrowser = Depends(get_library_browser),
    refresh: bool = Query(default=False, description="Re-fetch from the device"),
    format: Format = Query(default="json", description="Response format"),
) -> list[LibraryNode]:
    """Top level of the library, loaded once at startup unless ``refresh`` is set."""
    if format == "html":
        try:
            nodes = await browser.genres(refresh=refresh)
        except DeviceException as e:
            return TemplateRenderer.render_library(request, [], error=e.message)
        return TemplateRenderer.render_library(request, nodes)

    return await browser.genres(refresh=refresh)


@router.get(
    "/children",
    summary="List the direct children of a library node",
    responses={502: {"description": "Device reported an error"}, 503: {"description": "Device unreachable"}},
)
async def list_children(
    request: Request,
    root: str = Query(..., min_length=1, description="ID of the parent node"),
    browser: LibraryBrowser = Depends(get_library_browser),
    format: Format = Query(default="json", description="Response format"),
) -> list[LibraryNode]:
    """One step down the library tree from ``root``."""
    if format == "html":
        try:
            nodes = await browser.children(root)
        except DeviceException as e:
            return TemplateRenderer.render_library(request, [], root=root, error=e.message)
        return TemplateRenderer.render_library(request, nodes, root=root)

    return await browser.children(root)


@router.post("/refresh", summary="Drop cached library listings")
async def refresh_library(browser: LibraryBrowser = Depends(get_library_browser)) -> dict[str, int]:
    removed = await browser.invalidate()
    return {"removed": removed}
