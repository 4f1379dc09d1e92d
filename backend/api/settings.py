"""Settings API endpoints. Password hashes are never returned."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.api.deps import get_settings, get_settings_store, require_auth
from backend.config import Settings
from backend.filesystem.document_store import SettingsStore
from backend.schemas.settings import PublicSettings, SettingsUpdate
from backend.services.settings_service import public_settings, update_settings

router = APIRouter(
    prefix="/api/settings", tags=["settings"], dependencies=[Depends(require_auth)]
)


@router.get("", response_model=PublicSettings, response_model_by_alias=True)
async def get_site_settings(
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PublicSettings:
    return public_settings(store.get(), settings.secret_key)


@router.put("", response_model=PublicSettings, response_model_by_alias=True)
async def update_site_settings(
    body: SettingsUpdate,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PublicSettings:
    """Merge the update into the stored settings."""
    updated = update_settings(store, body, settings.secret_key)
    return public_settings(updated, settings.secret_key)
