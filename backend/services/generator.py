"""Static site generator: pages + theme -> one HTML file per page."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup

from backend.exceptions import GenerationError
from backend.schemas.page import HOME_SLUG

if TYPE_CHECKING:
    from backend.filesystem.document_store import ThemeStore
    from backend.filesystem.page_store import PageStore
    from backend.schemas.page import Page, Section
    from backend.schemas.theme import Theme

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
LAYOUT_TEMPLATE = "layout.html"
FALLBACK_SECTION_TEMPLATE = "sections/fallback.html"

_SECTION_TYPE_PATTERN = re.compile(r"[a-z0-9_-]+")


def output_filename(slug: str) -> str:
    """Map a slug to its generated file name."""
    return "index.html" if slug == HOME_SLUG else f"{slug}.html"


def create_jinja_env(templates_dir: Path | None = None) -> Environment:
    """Create the Jinja2 environment.

    Templates in ``templates_dir`` take priority over the packaged ones, so a
    site can override the layout or a single section type.
    """
    loaders = [FileSystemLoader(str(TEMPLATES_DIR))]
    if templates_dir is not None and templates_dir.is_dir():
        loaders.insert(0, FileSystemLoader(str(templates_dir)))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.globals["render_section"] = lambda section: _render_section(env, section)
    return env


def _render_section(env: Environment, section: Section) -> Markup:
    """Render one section; unknown types use the fallback template."""
    names = [FALLBACK_SECTION_TEMPLATE]
    if _SECTION_TYPE_PATTERN.fullmatch(section.type):
        names.insert(0, f"sections/{section.type}.html")
    template = env.select_template(names)
    return Markup(template.render(section=section, type=section.type, props=section.props))


class SiteGenerator:
    """Renders every stored page through the layout template."""

    def __init__(
        self,
        page_store: PageStore,
        theme_store: ThemeStore,
        output_dir: Path,
        templates_dir: Path | None = None,
    ) -> None:
        self.page_store = page_store
        self.theme_store = theme_store
        self.output_dir = output_dir
        self.env = create_jinja_env(templates_dir)

    def render_page(self, page: Page, theme: Theme) -> str:
        context: dict[str, Any] = {
            "page": page,
            "theme": theme,
            "sections": page.sections or [],
        }
        return self.env.get_template(LAYOUT_TEMPLATE).render(context)

    def _destination(self, slug: str) -> Path:
        """Output path for ``slug``; it must stay inside the output directory."""
        root = self.output_dir.resolve()
        destination = (root / output_filename(slug)).resolve()
        if destination.parent != root:
            raise GenerationError(
                f"Refusing to write page '{slug}' outside the output directory"
            )
        return destination

    def generate(self) -> int:
        """Regenerate every page. Returns the number of pages written.

        All pages are rendered before anything is written; a failure on any
        page raises GenerationError and leaves the output directory untouched.
        """
        theme = self.theme_store.get()
        pages = self.page_store.list()

        rendered: list[tuple[Path, str]] = []
        for page in pages:
            try:
                html = self.render_page(page, theme)
            except TemplateError as exc:
                logger.error("Failed to render page %s: %s", page.slug, exc)
                raise GenerationError(f"Failed to render page '{page.slug}': {exc}") from exc
            rendered.append((self._destination(page.slug), html))

        self.output_dir.mkdir(parents=True, exist_ok=True)
        for destination, html in rendered:
            destination.write_text(html, encoding="utf-8")

        logger.info("Generated %d pages into %s", len(rendered), self.output_dir)
        return len(rendered)
