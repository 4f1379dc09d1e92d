"""Single-document JSON stores for the theme and the site settings.

Each store owns one well-known file under the config directory and reads or
writes it whole. ``get()`` never fails on first run: a missing document is
synthesized from defaults and persisted.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from backend.exceptions import InternalServerError
from backend.schemas.settings import AdminAccount, StoredSettings
from backend.schemas.theme import Theme
from backend.services.auth_service import hash_password

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonDocumentStore:
    """Repository over a single JSON document at ``<config_dir>/<name>.json``."""

    def __init__(self, config_dir: Path, name: str) -> None:
        self.config_dir = config_dir
        self.path = config_dir / f"{name}.json"

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> dict[str, Any] | None:
        """Return the raw document, or None if it does not exist.

        Raises InternalServerError when the file is not a UTF-8 JSON object.
        """
        if not self.path.is_file():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InternalServerError(f"Corrupt document {self.path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise InternalServerError(f"Expected a JSON object in {self.path.name}")
        return data

    def parse(self, model: type[ModelT], data: dict[str, Any]) -> ModelT:
        try:
            return model.model_validate(data)
        except SchemaError as exc:
            raise InternalServerError(f"Invalid document {self.path.name}: {exc}") from exc

    def write(self, document: dict[str, Any]) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
        )


class ThemeStore(JsonDocumentStore):
    """The site theme."""

    def __init__(self, config_dir: Path) -> None:
        super().__init__(config_dir, "theme")

    def get(self) -> Theme:
        data = self.read()
        if data is None:
            theme = Theme()
            self.put(theme)
            logger.info("Created default theme at %s", self.path)
            return theme
        return self.parse(Theme, data)

    def put(self, theme: Theme) -> Theme:
        self.write(theme.model_dump(mode="json"))
        return theme


class SettingsStore(JsonDocumentStore):
    """Admin account, deployment target and auto-deploy flag.

    The merge rules for partial updates live in ``settings_service``; this
    store only reads and writes the whole document.
    """

    def __init__(
        self,
        config_dir: Path,
        bootstrap_username: str = "admin",
        bootstrap_password: str = "admin",
    ) -> None:
        super().__init__(config_dir, "settings")
        self.bootstrap_username = bootstrap_username
        self.bootstrap_password = bootstrap_password

    def get(self) -> StoredSettings:
        data = self.read()
        if data is None:
            settings = StoredSettings(
                admin=AdminAccount(
                    username=self.bootstrap_username,
                    password_hash=hash_password(self.bootstrap_password),
                )
            )
            self.put(settings)
            logger.info("Created default settings with admin user %r", self.bootstrap_username)
            return settings

        settings = self.parse(StoredSettings, data)
        if not settings.admin.password_hash:
            settings.admin.password_hash = hash_password(self.bootstrap_password)
            self.put(settings)
            logger.warning("Admin account had no password hash; reset to bootstrap password")
        return settings

    def put(self, settings: StoredSettings) -> StoredSettings:
        self.write(settings.to_document())
        return settings
