"""Theme API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.api.deps import get_publisher, get_theme_store, require_auth
from backend.filesystem.document_store import ThemeStore
from backend.schemas.theme import Theme
from backend.services.publish_service import SitePublisher

router = APIRouter(prefix="/api/theme", tags=["theme"], dependencies=[Depends(require_auth)])


@router.get("")
async def get_theme(
    store: Annotated[ThemeStore, Depends(get_theme_store)],
) -> Theme:
    return store.get()


@router.put("")
async def update_theme(
    body: Theme,
    store: Annotated[ThemeStore, Depends(get_theme_store)],
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> Theme:
    """Replace the theme, then regenerate the site."""
    theme = store.put(body)
    await publisher.after_change("updating theme")
    return theme
