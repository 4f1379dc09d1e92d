"""Page API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.api.deps import get_page_store, get_publisher, require_auth
from backend.filesystem.page_store import PageStore
from backend.schemas.page import DeleteResponse, Page
from backend.services.page_service import create_page, delete_page, update_page
from backend.services.publish_service import SitePublisher

router = APIRouter(prefix="/api/pages", tags=["pages"], dependencies=[Depends(require_auth)])


@router.get("")
async def list_pages(
    store: Annotated[PageStore, Depends(get_page_store)],
) -> list[Page]:
    """List all pages."""
    return store.list()


@router.get("/{slug}")
async def get_page_endpoint(
    slug: str,
    store: Annotated[PageStore, Depends(get_page_store)],
) -> Page:
    return store.get(slug)


@router.post("", status_code=201)
async def create_page_endpoint(
    body: Page,
    store: Annotated[PageStore, Depends(get_page_store)],
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> Page:
    """Create a page, then regenerate the site."""
    page = create_page(store, body)
    await publisher.after_change(f"creating page {page.slug}")
    return page


@router.put("/{slug}")
async def update_page_endpoint(
    slug: str,
    body: Page,
    store: Annotated[PageStore, Depends(get_page_store)],
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> Page:
    """Update a page. A different slug in the body renames it."""
    page = update_page(store, slug, body)
    await publisher.after_change(f"updating page {page.slug}")
    return page


@router.delete("/{slug}")
async def delete_page_endpoint(
    slug: str,
    store: Annotated[PageStore, Depends(get_page_store)],
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> DeleteResponse:
    delete_page(store, slug)
    await publisher.after_change(f"deleting page {slug}")
    return DeleteResponse()
