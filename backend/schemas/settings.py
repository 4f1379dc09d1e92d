"""Site settings schemas: admin account, deployment target, auto-deploy flag.

Three shapes exist on purpose:

- ``StoredSettings`` is the document on disk. It holds ``passwordHash`` and the
  (sealed) deployment password.
- ``PublicSettings`` is what the API returns. It never carries a hash.
- ``SettingsUpdate`` is what the API accepts. Every field is optional so that a
  partial update leaves the rest untouched.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AdminAccount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = "admin"
    password_hash: str = Field(default="", alias="passwordHash")


class DeploymentConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    host: str = ""
    port: int = Field(default=22, ge=1, le=65535)
    username: str = ""
    password: str = ""
    remote_path: str = Field(default="", alias="remotePath")

    def missing_fields(self) -> list[str]:
        """Return the required fields that are empty."""
        required = {"host": self.host, "username": self.username, "remotePath": self.remote_path}
        return [name for name, value in required.items() if not value.strip()]


class StoredSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin: AdminAccount = Field(default_factory=AdminAccount)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    auto_deploy: bool = Field(default=False, alias="autoDeploy")

    def to_document(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class PublicAdmin(BaseModel):
    username: str
    password: str = ""


class PublicSettings(BaseModel):
    """Settings as returned to the admin client."""

    model_config = ConfigDict(populate_by_name=True)

    admin: PublicAdmin
    deployment: DeploymentConfig
    auto_deploy: bool = Field(alias="autoDeploy")


class AdminUpdate(BaseModel):
    username: str | None = None
    password: str | None = None


class DeploymentUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    username: str | None = None
    password: str | None = None
    remote_path: str | None = Field(default=None, alias="remotePath")


class SettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin: AdminUpdate | None = None
    deployment: DeploymentUpdate | None = None
    auto_deploy: bool | None = Field(default=None, alias="autoDeploy")
