"""Page service: create, rename-via-update and delete with home-page rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backend.exceptions import NotFoundError, ValidationError
from backend.filesystem.page_store import validate_slug
from backend.schemas.page import HOME_SLUG, Page, Section

if TYPE_CHECKING:
    from backend.filesystem.page_store import PageStore

logger = logging.getLogger(__name__)


def create_page(store: PageStore, page: Page) -> Page:
    """Write a new page (an existing page with the same slug is overwritten)."""
    validate_slug(page.slug)
    return store.put(page)


def update_page(store: PageStore, current_slug: str, page: Page) -> Page:
    """Write ``page`` under its own slug, removing ``current_slug`` on rename.

    The write and the delete are two separate file operations; a crash in
    between leaves both files on disk.
    """
    validate_slug(page.slug)
    validate_slug(current_slug)
    store.put(page)
    if current_slug != page.slug:
        try:
            store.delete(current_slug)
        except NotFoundError:
            logger.debug("Renamed page %s had no file to remove", current_slug)
        else:
            logger.info("Renamed page %s -> %s", current_slug, page.slug)
    return page


def delete_page(store: PageStore, slug: str) -> None:
    if slug == HOME_SLUG:
        raise ValidationError("Home page cannot be deleted")
    store.delete(slug)


def ensure_home_page(store: PageStore) -> bool:
    """Create a default home page when none exists. Returns True if created."""
    if store.exists(HOME_SLUG):
        return False
    store.put(
        Page(
            slug=HOME_SLUG,
            title="Home",
            sections=[
                Section(
                    type="hero",
                    props={
                        "title": "Welcome",
                        "subtitle": "This site was built with Pagewright.",
                        "cta": "Get started",
                        "ctaLink": "#",
                    },
                ),
            ],
        )
    )
    logger.info("Created default home page")
    return True
