"""Page store: one JSON document per page, keyed by slug."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

from pydantic import ValidationError as SchemaError

from backend.exceptions import InternalServerError, NotFoundError, ValidationError
from backend.schemas.page import Page

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 80
_SLUG_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")


def validate_slug(slug: str) -> str:
    """Check that a slug is non-empty and safe to use as a file name stem.

    Raises ValidationError for empty slugs, path separators, ``..`` and any
    character outside ``[A-Za-z0-9_-]``.
    """
    if not slug:
        raise ValidationError("Slug is required")
    if len(slug) > MAX_SLUG_LENGTH or not _SLUG_PATTERN.fullmatch(slug):
        raise ValidationError(
            "Invalid slug: must start with a letter or digit and contain only "
            "letters, digits, hyphens, or underscores."
        )
    return slug


class PageStore:
    """Reads and writes ``<pages_dir>/<slug>.json``."""

    def __init__(self, pages_dir: Path) -> None:
        self.pages_dir = pages_dir

    def _path_for(self, slug: str) -> Path:
        validate_slug(slug)
        full_path = (self.pages_dir / f"{slug}.json").resolve()
        if not full_path.is_relative_to(self.pages_dir.resolve()):
            raise ValidationError(f"Path traversal detected: {slug}")
        return full_path

    def _load(self, path: Path) -> Page:
        """Parse a page file. The stored slug must be the file name stem."""
        try:
            page = Page.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError, SchemaError) as exc:
            raise InternalServerError(f"Corrupt page file {path.name}: {exc}") from exc
        if page.slug != path.stem:
            raise InternalServerError(
                f"Page file {path.name} holds mismatched slug {page.slug!r}"
            )
        return page

    def list(self) -> list[Page]:
        """Return every stored page, ordered by file name. Unreadable files are skipped."""
        if not self.pages_dir.is_dir():
            return []
        pages: list[Page] = []
        for path in sorted(self.pages_dir.glob("*.json")):
            try:
                validate_slug(path.stem)
                pages.append(self._load(path))
            except (ValidationError, InternalServerError):
                logger.warning("Skipping unreadable page file %s", path.name, exc_info=True)
        return pages

    def exists(self, slug: str) -> bool:
        return self._path_for(slug).is_file()

    def get(self, slug: str) -> Page:
        path = self._path_for(slug)
        if not path.is_file():
            raise NotFoundError("Page not found")
        return self._load(path)

    def put(self, page: Page) -> Page:
        """Write or overwrite the file for ``page.slug``."""
        path = self._path_for(page.slug)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(page.to_document(), indent=2, ensure_ascii=False)
        path.write_text(payload, encoding="utf-8")
        logger.debug("Wrote page %s", page.slug)
        return page

    def delete(self, slug: str) -> None:
        path = self._path_for(slug)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError("Page not found") from exc
        logger.debug("Deleted page %s", slug)
