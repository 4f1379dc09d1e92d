"""Tests for page create, rename and delete rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from backend.exceptions import NotFoundError, ValidationError
from backend.schemas.page import Page
from backend.services.page_service import (
    create_page,
    delete_page,
    ensure_home_page,
    update_page,
)

if TYPE_CHECKING:
    from backend.filesystem.page_store import PageStore


class TestCreatePage:
    def test_create_then_get(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="about", title="About"))
        assert page_store.get("about").title == "About"

    def test_empty_slug_rejected(self, page_store: PageStore) -> None:
        with pytest.raises(ValidationError, match="Slug is required"):
            create_page(page_store, Page(slug="", title="x"))
        assert page_store.list() == []


class TestUpdatePage:
    def test_update_in_place(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="about", title="About"))
        update_page(page_store, "about", Page(slug="about", title="About us"))
        assert page_store.get("about").title == "About us"

    def test_rename_moves_the_file(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="about", title="About"))
        update_page(page_store, "about", Page(slug="about-us", title="About"))
        assert not page_store.exists("about")
        assert page_store.get("about-us").title == "About"

    def test_rename_of_missing_page_still_writes(self, page_store: PageStore) -> None:
        update_page(page_store, "ghost", Page(slug="real", title="Real"))
        assert page_store.exists("real")

    def test_invalid_target_slug_rejected(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="about", title="About"))
        with pytest.raises(ValidationError):
            update_page(page_store, "about", Page(slug="../escape", title="x"))
        assert page_store.exists("about")


class TestDeletePage:
    def test_delete(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="about", title="About"))
        delete_page(page_store, "about")
        assert not page_store.exists("about")

    def test_home_page_cannot_be_deleted(self, page_store: PageStore) -> None:
        ensure_home_page(page_store)
        with pytest.raises(ValidationError, match="Home page cannot be deleted"):
            delete_page(page_store, "index")
        assert page_store.exists("index")

    def test_delete_missing_page(self, page_store: PageStore) -> None:
        with pytest.raises(NotFoundError):
            delete_page(page_store, "nope")


class TestEnsureHomePage:
    def test_creates_once(self, page_store: PageStore) -> None:
        assert ensure_home_page(page_store) is True
        assert ensure_home_page(page_store) is False
        home = page_store.get("index")
        assert home.sections[0].type == "hero"

    def test_existing_home_is_untouched(self, page_store: PageStore) -> None:
        create_page(page_store, Page(slug="index", title="Mine"))
        ensure_home_page(page_store)
        assert page_store.get("index").title == "Mine"
