"""Page and section schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

HOME_SLUG = "index"

# Default props for the section types the editor knows about. Unknown types
# are still accepted and stored; the generator renders a fallback for them.
SECTION_DEFAULTS: dict[str, dict[str, str]] = {
    "text": {"content": "<p>New paragraph.</p>"},
    "hero": {
        "title": "Hero title",
        "subtitle": "An inspiring subtitle",
        "cta": "Learn more",
        "ctaLink": "#",
    },
    "image": {
        "src": "https://placehold.co/800x400",
        "alt": "Image",
        "caption": "",
    },
}


class Section(BaseModel):
    """One typed content block within a page. Extra fields are kept."""

    model_config = ConfigDict(extra="allow")

    type: str = "text"
    props: dict[str, Any] = Field(default_factory=dict)


class Page(BaseModel):
    """A page: slug, title and an ordered list of sections.

    Extra top-level fields sent by clients are kept so that a write followed
    by a read returns what was written.
    """

    model_config = ConfigDict(extra="allow")

    slug: str = ""
    title: str = ""
    sections: list[Section] = Field(default_factory=list)

    @field_validator("slug", "title", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("sections", mode="before")
    @classmethod
    def _default_sections(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return value

    @property
    def is_home(self) -> bool:
        return self.slug == HOME_SLUG

    def to_document(self) -> dict[str, Any]:
        """Serialize for storage and API responses."""
        return self.model_dump(mode="json")


class DeleteResponse(BaseModel):
    """Acknowledgement for a deleted page."""

    message: str = "Deleted"
