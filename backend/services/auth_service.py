"""Authentication service: JWT session tokens and password hashing."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
from jose import JWTError, jwt

if TYPE_CHECKING:
    from backend.schemas.settings import StoredSettings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME_HOURS = 12
_DUMMY_PASSWORD_HASH = bcrypt.hashpw(b"pagewright-dummy-password", bcrypt.gensalt()).decode(
    "utf-8"
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. A malformed hash never verifies."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(
    username: str,
    secret_key: str,
    expires_hours: int = TOKEN_LIFETIME_HOURS,
    *,
    now: datetime | None = None,
) -> str:
    """Create a signed session token for ``username``."""
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(hours=expires_hours)
    claims = {
        "username": username,
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
        "type": "access",
    }
    return str(jwt.encode(claims, secret_key, algorithm=ALGORITHM))


def decode_access_token(token: str, secret_key: str) -> dict[str, Any] | None:
    """Decode a session token. Returns None on a bad signature or expiry."""
    try:
        payload: dict[str, Any] = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        logger.debug("Failed to decode access token", exc_info=True)
        return None
    if payload.get("type") != "access" or not isinstance(payload.get("username"), str):
        return None
    return payload


def authenticate_admin(settings: StoredSettings, username: str, password: str) -> bool:
    """Check credentials against the stored admin account."""
    admin = settings.admin
    if username != admin.username:
        # Run a dummy hash check to reduce username timing side channels.
        verify_password(password, _DUMMY_PASSWORD_HASH)
        return False
    return verify_password(password, admin.password_hash)
