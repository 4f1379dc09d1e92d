"""Admin editor state: what the browser client holds between API calls.

The state is an immutable value; every action returns a new state. Nothing
here talks to the network. ``save_request`` and ``delete_request`` describe
the API call the client must make, which pins down the request contracts the
server honours (POST for new drafts, PUT keyed by the original slug).

The server never calls into this module. It is the reference model of the
browser admin client served from ``/admin``, and its tests fix that client's
behaviour against the API.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from backend.exceptions import ValidationError
from backend.schemas.page import HOME_SLUG, SECTION_DEFAULTS, Page, Section
from backend.schemas.settings import PublicAdmin, PublicSettings
from backend.schemas.theme import Theme
from backend.services.generator import output_filename

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

API_PREFIX = "/api"


def preview_url_for(slug: str) -> str:
    return f"/public/{output_filename(slug)}"


def new_section(section_type: str) -> Section:
    """A section with the editor's default props; unknown types become text."""
    if section_type not in SECTION_DEFAULTS:
        section_type = "text"
    return Section(type=section_type, props=copy.deepcopy(SECTION_DEFAULTS[section_type]))


@dataclass(frozen=True)
class Draft:
    """The page being edited. ``original_slug`` is None until first saved."""

    page: Page
    original_slug: str | None = None

    @property
    def is_new(self) -> bool:
        return self.original_slug is None


def _default_settings() -> PublicSettings:
    return PublicSettings.model_validate(
        {"admin": PublicAdmin(username="admin"), "deployment": {}, "autoDeploy": False}
    )


@dataclass(frozen=True)
class EditorState:
    pages: tuple[Page, ...] = ()
    current: Draft | None = None
    theme: Theme = field(default_factory=Theme)
    settings: PublicSettings = field(default_factory=_default_settings)
    preview_url: str = preview_url_for(HOME_SLUG)


def _draft_of(page: Page) -> Draft:
    return Draft(page=page.model_copy(deep=True), original_slug=page.slug)


def load(
    state: EditorState,
    pages: Sequence[Page],
    theme: Theme,
    settings: PublicSettings,
) -> EditorState:
    """Replace the loaded data, keeping the current selection when it still exists."""
    current = None
    if state.current is not None:
        match = next((p for p in pages if p.slug == state.current.page.slug), None)
        if match is not None:
            current = _draft_of(match)
    if current is None and pages:
        current = _draft_of(pages[0])
    return replace(
        state,
        pages=tuple(pages),
        current=current,
        theme=theme,
        settings=settings,
        preview_url=preview_url_for(current.page.slug) if current else state.preview_url,
    )


def select(state: EditorState, slug: str) -> EditorState:
    match = next((p for p in state.pages if p.slug == slug), None)
    if match is None:
        raise ValidationError(f"Unknown page: {slug}")
    return replace(state, current=_draft_of(match), preview_url=preview_url_for(slug))


def new_draft(state: EditorState, now: datetime) -> EditorState:
    page = Page(
        slug=f"page-{int(now.timestamp() * 1000)}",
        title="New page",
        sections=[Section(type="text", props={"content": "<p>Your page content.</p>"})],
    )
    return replace(state, current=Draft(page=page))


def _with_sections(state: EditorState, sections: list[Section]) -> EditorState:
    if state.current is None:
        return state
    page = state.current.page.model_copy(update={"sections": sections})
    return replace(state, current=replace(state.current, page=page))


def add_section(state: EditorState, section_type: str) -> EditorState:
    if state.current is None:
        return state
    return _with_sections(state, [*state.current.page.sections, new_section(section_type)])


def remove_section(state: EditorState, index: int) -> EditorState:
    if state.current is None:
        return state
    sections = list(state.current.page.sections)
    if not 0 <= index < len(sections):
        raise ValidationError(f"No section at index {index}")
    del sections[index]
    return _with_sections(state, sections)


def save_request(state: EditorState) -> tuple[str, str, dict[str, Any]]:
    """The (method, path, body) that saves the current draft."""
    if state.current is None:
        raise ValidationError("No page selected")
    payload = state.current.page.to_document()
    if state.current.is_new:
        return "POST", f"{API_PREFIX}/pages", payload
    return "PUT", f"{API_PREFIX}/pages/{state.current.original_slug}", payload


def delete_request(state: EditorState) -> tuple[str, str]:
    """The (method, path) that deletes the current page."""
    if state.current is None:
        raise ValidationError("No page selected")
    slug = state.current.original_slug or state.current.page.slug
    if slug == HOME_SLUG:
        raise ValidationError("Home page cannot be deleted")
    return "DELETE", f"{API_PREFIX}/pages/{slug}"
