"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_SECRET_KEY = "change-me-in-production"


class Settings(BaseSettings):
    """Pagewright application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    secret_key: str = INSECURE_SECRET_KEY
    debug: bool = False
    expose_docs: bool = False

    # Paths
    data_dir: Path = Path("./site")
    output_dir: Path = Path("./public")
    admin_dir: Path = Path("./admin")
    templates_dir: Path | None = None

    # Server
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    # CORS
    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=list)

    # Auth
    access_token_expire_hours: int = Field(default=12, ge=1)
    auth_login_max_failures: int = Field(default=5, ge=1)
    auth_rate_limit_window_seconds: int = Field(default=300, ge=1)

    # Admin bootstrap
    admin_username: str = "admin"
    admin_password: str = "admin"

    # Deployment
    deploy_timeout_seconds: float = Field(default=30.0, gt=0)

    # Response hardening
    security_headers_enabled: bool = True

    @property
    def pages_dir(self) -> Path:
        return self.data_dir / "pages"

    @property
    def config_dir(self) -> Path:
        return self.data_dir / "config"

    def validate_runtime_security(self) -> None:
        """Validate security-critical production settings."""
        if self.debug:
            return

        violations: list[str] = []
        if self.secret_key == INSECURE_SECRET_KEY or len(self.secret_key) < 32:
            violations.append(
                "SECRET_KEY must be overridden with a high-entropy value (>=32 chars)"
            )
        # The bootstrap password only matters until the settings document exists.
        first_run = not (self.config_dir / "settings.json").is_file()
        if first_run and self.admin_password == "admin":
            violations.append("ADMIN_PASSWORD must be overridden before first run")

        if violations:
            joined = "; ".join(violations)
            raise ValueError(f"Insecure production configuration: {joined}")
