"""Authentication API endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from backend.api.deps import get_settings, get_settings_store
from backend.config import Settings
from backend.exceptions import AuthError, ValidationError
from backend.filesystem.document_store import SettingsStore
from backend.schemas.auth import LoginRequest, TokenResponse
from backend.services.auth_service import authenticate_admin, create_access_token
from backend.services.rate_limit_service import LoginThrottle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _get_client_ip(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    settings_store: Annotated[SettingsStore, Depends(get_settings_store)],
) -> TokenResponse:
    """Exchange admin credentials for a signed session token."""
    if not body.username or not body.password:
        raise ValidationError("Username and password are required")

    throttle: LoginThrottle = request.app.state.login_throttle
    client_key = f"{_get_client_ip(request)}:{body.username.lower()}"
    retry_after = throttle.retry_after(client_key)
    if retry_after:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many failed login attempts",
            headers={"Retry-After": str(retry_after)},
        )

    if not authenticate_admin(settings_store.get(), body.username, body.password):
        throttle.record_failure(client_key)
        logger.warning("Failed login for %r from %s", body.username, _get_client_ip(request))
        raise AuthError("Invalid credentials")

    throttle.reset(client_key)
    token = create_access_token(
        body.username, settings.secret_key, settings.access_token_expire_hours
    )
    return TokenResponse(token=token)
