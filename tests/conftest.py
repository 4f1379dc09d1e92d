"""Shared test fixtures for Pagewright."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from backend.config import Settings
from backend.filesystem.document_store import SettingsStore, ThemeStore
from backend.filesystem.page_store import PageStore
from backend.main import create_app, ensure_site_scaffold

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path

TEST_SECRET_KEY = "test-secret-key-with-at-least-32-characters"
TEST_ADMIN_PASSWORD = "admin123"


@asynccontextmanager
async def create_test_client(settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client with a fully initialized app.

    Performs the startup work of the application lifespan (scaffold, initial
    generation) because ASGITransport does not trigger it.
    """
    app = create_app(settings)
    settings.validate_runtime_security()
    ensure_site_scaffold(app)
    app.state.publisher.generate()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def login(client: AsyncClient, password: str = TEST_ADMIN_PASSWORD) -> dict[str, str]:
    """Log in as the admin and return an Authorization header."""
    resp = await client.post("/api/login", json={"username": "admin", "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def tmp_site_dir(tmp_path: Path) -> Path:
    """Create a temporary site data directory with an empty pages folder."""
    site = tmp_path / "site"
    (site / "pages").mkdir(parents=True)
    return site


@pytest.fixture
def test_settings(tmp_site_dir: Path, tmp_path: Path) -> Settings:
    """Create test settings with temporary paths."""
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET_KEY,
        debug=True,
        data_dir=tmp_site_dir,
        output_dir=tmp_path / "public",
        admin_dir=tmp_path / "admin",
        admin_username="admin",
        admin_password=TEST_ADMIN_PASSWORD,
    )


@pytest.fixture
def page_store(test_settings: Settings) -> PageStore:
    return PageStore(test_settings.pages_dir)


@pytest.fixture
def theme_store(test_settings: Settings) -> ThemeStore:
    return ThemeStore(test_settings.config_dir)


@pytest.fixture
def settings_store(test_settings: Settings) -> SettingsStore:
    return SettingsStore(
        test_settings.config_dir,
        bootstrap_username=test_settings.admin_username,
        bootstrap_password=test_settings.admin_password,
    )


@pytest.fixture
async def client(test_settings: Settings) -> AsyncGenerator[AsyncClient]:
    async with create_test_client(test_settings) as ac:
        yield ac


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    return await login(client)
