"""Sealing of deployment credentials stored in the settings document.

Sealed values carry an ``enc:`` prefix so that clear-text values written by
older versions (or edited by hand) are still readable.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

SEALED_PREFIX = "enc:"


def _fernet(secret_key: str) -> Fernet:
    digest = hashlib.sha256(secret_key.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def is_sealed(value: str) -> bool:
    return value.startswith(SEALED_PREFIX)


def seal_secret(plaintext: str, secret_key: str) -> str:
    """Encrypt ``plaintext``. Empty strings stay empty."""
    if not plaintext:
        return ""
    token = _fernet(secret_key).encrypt(plaintext.encode()).decode()
    return f"{SEALED_PREFIX}{token}"


def open_secret(value: str, secret_key: str) -> str:
    """Decrypt a sealed value; clear-text values are returned unchanged.

    Raises ValueError when a sealed value cannot be decrypted with this key.
    """
    if not is_sealed(value):
        return value
    try:
        return _fernet(secret_key).decrypt(value[len(SEALED_PREFIX) :].encode()).decode()
    except InvalidToken as exc:
        raise ValueError("Failed to decrypt deployment credential") from exc
