"""Application-level exception types.

Convention:
- ``ValidationError`` (400), ``AuthError`` (401) and ``NotFoundError`` (404)
  carry messages that are safe to forward to clients.
- ``ConfigError``, ``GenerationError`` and ``DeployError`` surface as 500 with
  their message, so the administrator can see why a build or upload failed.
- ``InternalServerError`` is for errors whose details must never reach
  clients. The global handler logs the full message and returns a generic
  "Internal server error".

The global handlers live in ``backend/main.py``.
"""

from __future__ import annotations


class SiteError(Exception):
    """Base class for errors translated to an HTTP response."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SiteError):
    """Bad or missing input, e.g. an empty slug."""

    status_code = 400


class AuthError(SiteError):
    """Bad credentials, or a missing, invalid or expired token."""

    status_code = 401


class NotFoundError(SiteError):
    """Unknown page slug."""

    status_code = 404


class ConfigError(SiteError):
    """Deployment settings are incomplete."""


class GenerationError(SiteError):
    """A page failed to render; nothing was written."""


class DeployError(SiteError):
    """Connection, authentication or transfer failure while deploying."""


class InternalServerError(Exception):
    """Raised for internal errors whose details must not be exposed to clients."""
