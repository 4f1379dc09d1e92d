"""Authentication schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request.

    Fields are optional at the schema level so that a missing field is
    reported as 400 by the endpoint rather than a 422 validation error.
    """

    username: str | None = Field(default=None, max_length=50)
    password: str | None = Field(default=None, max_length=200)


class TokenResponse(BaseModel):
    """Signed session token."""

    token: str
