"""Tests for the theme and settings document stores and the settings merge."""

from __future__ import annotations

import json

import pytest

from backend.exceptions import InternalServerError
from backend.filesystem.document_store import SettingsStore, ThemeStore
from backend.schemas.settings import (
    AdminUpdate,
    DeploymentUpdate,
    SettingsUpdate,
    StoredSettings,
)
from backend.schemas.theme import Theme, ThemeColors
from backend.services.auth_service import verify_password
from backend.services.crypto_service import is_sealed
from backend.services.settings_service import (
    deployment_config,
    public_settings,
    update_settings,
)

SECRET = "test-secret-key-with-at-least-32-characters"


class TestThemeStore:
    def test_first_read_creates_default_theme(self, theme_store: ThemeStore) -> None:
        assert not theme_store.exists()
        theme = theme_store.get()
        assert theme_store.exists()
        assert theme.colors.primary == "#9C6BFF"
        assert theme.fonts.display == "Outfit"
        assert theme.radius.large == "2rem"

    def test_put_replaces_whole_document(self, theme_store: ThemeStore) -> None:
        theme = Theme(colors=ThemeColors(primary="#000000"))
        theme_store.put(theme)
        assert theme_store.get().colors.primary == "#000000"
        stored = json.loads(theme_store.path.read_text(encoding="utf-8"))
        assert set(stored) == {"colors", "fonts", "radius"}


class TestSettingsStore:
    def test_first_read_creates_hashed_admin(self, settings_store: SettingsStore) -> None:
        settings = settings_store.get()
        assert settings.admin.username == "admin"
        assert settings.admin.password_hash != "admin123"
        assert verify_password("admin123", settings.admin.password_hash)
        assert settings.auto_deploy is False

    def test_document_uses_camel_case_keys(self, settings_store: SettingsStore) -> None:
        settings_store.get()
        stored = json.loads(settings_store.path.read_text(encoding="utf-8"))
        assert "passwordHash" in stored["admin"]
        assert "remotePath" in stored["deployment"]
        assert "autoDeploy" in stored

    def test_missing_hash_is_filled_from_bootstrap(self, settings_store: SettingsStore) -> None:
        settings_store.config_dir.mkdir(parents=True, exist_ok=True)
        settings_store.path.write_text(json.dumps({"admin": {"username": "admin"}}))
        settings = settings_store.get()
        assert verify_password("admin123", settings.admin.password_hash)
        stored = json.loads(settings_store.path.read_text(encoding="utf-8"))
        assert stored["admin"]["passwordHash"]


class TestSettingsMerge:
    def test_deployment_update_preserves_admin(self, settings_store: SettingsStore) -> None:
        before = settings_store.get()
        update = SettingsUpdate(deployment=DeploymentUpdate(host="example.com"))
        after = update_settings(settings_store, update, SECRET)
        assert after.admin == before.admin
        assert after.deployment.host == "example.com"

    def test_omitted_deployment_fields_keep_values(self, settings_store: SettingsStore) -> None:
        update_settings(
            settings_store,
            SettingsUpdate(deployment=DeploymentUpdate(host="h", username="u", remote_path="/w")),
            SECRET,
        )
        after = update_settings(
            settings_store, SettingsUpdate(deployment=DeploymentUpdate(port=2222)), SECRET
        )
        assert after.deployment.host == "h"
        assert after.deployment.remote_path == "/w"
        assert after.deployment.port == 2222

    def test_new_password_replaces_only_hash(self, settings_store: SettingsStore) -> None:
        update = SettingsUpdate(admin=AdminUpdate(password="n3w-passw0rd"))
        after = update_settings(settings_store, update, SECRET)
        assert after.admin.username == "admin"
        assert verify_password("n3w-passw0rd", after.admin.password_hash)
        assert "n3w-passw0rd" not in settings_store.path.read_text(encoding="utf-8")

    def test_empty_password_keeps_existing_hash(self, settings_store: SettingsStore) -> None:
        before = settings_store.get().admin.password_hash
        after = update_settings(
            settings_store, SettingsUpdate(admin=AdminUpdate(username="", password="")), SECRET
        )
        assert after.admin.password_hash == before
        assert after.admin.username == "admin"

    def test_auto_deploy_only_changes_when_supplied(self, settings_store: SettingsStore) -> None:
        update_settings(settings_store, SettingsUpdate(auto_deploy=True), SECRET)
        after = update_settings(settings_store, SettingsUpdate(), SECRET)
        assert after.auto_deploy is True

    def test_deployment_password_is_sealed_at_rest(self, settings_store: SettingsStore) -> None:
        update = SettingsUpdate(deployment=DeploymentUpdate(password="sftp-secret"))
        stored = update_settings(settings_store, update, SECRET)
        assert is_sealed(stored.deployment.password)
        assert "sftp-secret" not in settings_store.path.read_text(encoding="utf-8")
        assert deployment_config(stored, SECRET).password == "sftp-secret"

    def test_clear_text_deployment_password_is_still_read(self) -> None:
        stored = StoredSettings.model_validate({"deployment": {"password": "legacy"}})
        assert deployment_config(stored, SECRET).password == "legacy"

    def test_wrong_secret_is_an_internal_error(self, settings_store: SettingsStore) -> None:
        update = SettingsUpdate(deployment=DeploymentUpdate(password="sftp-secret"))
        stored = update_settings(settings_store, update, SECRET)
        with pytest.raises(InternalServerError):
            deployment_config(stored, "another-secret")


class TestPublicSettings:
    def test_public_view_has_no_hash(self, settings_store: SettingsStore) -> None:
        document = public_settings(settings_store.get(), SECRET).model_dump(by_alias=True)
        assert document["admin"] == {"username": "admin", "password": ""}
        assert "passwordHash" not in json.dumps(document)
        assert "autoDeploy" in document


class TestCorruptDocuments:
    @pytest.mark.parametrize(
        "content",
        ['{"colors": "red"}', '["a list"]', "{not json", b'{"fonts": {"body": "\xff"}}'],
    )
    def test_corrupt_theme_is_an_internal_error(
        self, theme_store: ThemeStore, content: str | bytes
    ) -> None:
        theme_store.config_dir.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            theme_store.path.write_bytes(content)
        else:
            theme_store.path.write_text(content, encoding="utf-8")
        with pytest.raises(InternalServerError):
            theme_store.get()

    def test_corrupt_settings_is_an_internal_error(self, settings_store: SettingsStore) -> None:
        settings_store.config_dir.mkdir(parents=True, exist_ok=True)
        settings_store.path.write_text('{"admin": {"username": ["x"]}}', encoding="utf-8")
        with pytest.raises(InternalServerError, match="settings.json"):
            settings_store.get()
