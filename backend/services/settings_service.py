"""Settings business logic: merge-on-write, public view, deployment config."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backend.exceptions import InternalServerError
from backend.schemas.settings import DeploymentConfig, PublicAdmin, PublicSettings
from backend.services.auth_service import hash_password
from backend.services.crypto_service import open_secret, seal_secret

if TYPE_CHECKING:
    from backend.filesystem.document_store import SettingsStore
    from backend.schemas.settings import SettingsUpdate, StoredSettings

logger = logging.getLogger(__name__)


def deployment_config(settings: StoredSettings, secret_key: str) -> DeploymentConfig:
    """Return the deployment target with the password decrypted."""
    deployment = settings.deployment
    try:
        password = open_secret(deployment.password, secret_key)
    except ValueError as exc:
        raise InternalServerError(
            "Stored deployment password cannot be decrypted; was SECRET_KEY changed?"
        ) from exc
    return deployment.model_copy(update={"password": password})


def public_settings(settings: StoredSettings, secret_key: str) -> PublicSettings:
    """Settings safe to return to the client: no password hash."""
    return PublicSettings(
        admin=PublicAdmin(username=settings.admin.username),
        deployment=deployment_config(settings, secret_key),
        auto_deploy=settings.auto_deploy,
    )


def update_settings(
    store: SettingsStore, update: SettingsUpdate, secret_key: str
) -> StoredSettings:
    """Merge ``update`` into the stored settings and persist the result.

    Omitted fields keep their values. A new admin password replaces only the
    hash; the plaintext is never stored.
    """
    current = store.get()
    admin = current.admin
    if update.admin is not None:
        if update.admin.username:
            admin = admin.model_copy(update={"username": update.admin.username})
        if update.admin.password:
            admin = admin.model_copy(update={"password_hash": hash_password(update.admin.password)})
            logger.info("Admin password changed")

    deployment = current.deployment
    if update.deployment is not None:
        changes = update.deployment.model_dump(exclude_none=True)
        if "password" in changes:
            changes["password"] = seal_secret(changes["password"], secret_key)
        deployment = deployment.model_copy(update=changes)

    auto_deploy = current.auto_deploy
    if update.auto_deploy is not None:
        auto_deploy = update.auto_deploy

    merged = current.model_copy(
        update={"admin": admin, "deployment": deployment, "auto_deploy": auto_deploy}
    )
    return store.put(merged)
