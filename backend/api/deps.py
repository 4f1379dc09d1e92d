"""Shared API dependencies: settings, stores, publisher, auth."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.config import Settings
from backend.exceptions import AuthError
from backend.filesystem.document_store import SettingsStore, ThemeStore
from backend.filesystem.page_store import PageStore
from backend.services.auth_service import decode_access_token
from backend.services.publish_service import SitePublisher

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Get application settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


def get_page_store(request: Request) -> PageStore:
    store: PageStore = request.app.state.page_store
    return store


def get_theme_store(request: Request) -> ThemeStore:
    store: ThemeStore = request.app.state.theme_store
    return store


def get_settings_store(request: Request) -> SettingsStore:
    store: SettingsStore = request.app.state.settings_store
    return store


def get_publisher(request: Request) -> SitePublisher:
    publisher: SitePublisher = request.app.state.publisher
    return publisher


async def require_auth(
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
) -> str:
    """Require a valid bearer token. Returns the authenticated username."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Missing token")
    payload = decode_access_token(credentials.credentials, settings.secret_key)
    if payload is None:
        raise AuthError("Invalid token")
    username: str = payload["username"]
    return username
