"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MAILKEYS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Filesystem layout
    key_dir: Path = Field(
        default=Path("/tmp/docker-mailserver/rspamd/dkim"),
        description="Directory holding the generated key artifacts",
    )
    override_dir: Path = Field(
        default=Path("/tmp/docker-mailserver/rspamd/override.d"),
        description="Persisted, administrator-editable rspamd override directory",
    )
    live_config_dir: Path = Field(
        default=Path("/etc/rspamd/override.d"),
        description="Override directory rspamd loads at runtime",
    )
    persistence_root: Path = Field(
        default=Path("/tmp/docker-mailserver"),
        description="Volume that must be mounted for keys to survive container recreation",
    )
    signing_config_name: str = Field(
        default="dkim_signing.conf",
        description="File name of the DKIM signing configuration",
    )

    # Service identity
    service_name: str = Field(
        default="rspamd",
        description="Supervisor program name of the mail filter",
    )
    service_user: str = Field(
        default="_rspamd",
        description="User the mail filter runs as",
    )
    service_group: str = Field(
        default="_rspamd",
        description="Group the mail filter runs as",
    )
    run_as_service_user: bool = Field(
        default=True,
        description="Run the key generator and permission audit as service_user",
    )
    manage_ownership: bool = Field(
        default=True,
        description="Hand written keys and configs to service_user/service_group",
    )

    # External commands
    keygen_command: str = Field(
        default="rspamadm dkim_keygen",
        description="Command line of the DKIM key generator",
    )
    restart_command: str = Field(
        default="supervisorctl restart {service}",
        description="Command line restarting the mail filter ({service} is substituted)",
    )
    permission_denied_marker: str = Field(
        default="Permission denied",
        description="Text in the generator log that marks a failed run despite exit status 0",
    )

    # Logging
    log_level: Literal["trace", "debug", "info", "warn", "error"] = Field(
        default="info",
        description="Minimum level of log output",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log lines as JSON instead of console text",
    )

    @property
    def override_config_path(self) -> Path:
        """Persisted copy of the signing config."""
        return self.override_dir / self.signing_config_name

    @property
    def live_config_path(self) -> Path:
        """Runtime copy of the signing config."""
        return self.live_config_dir / self.signing_config_name

    @property
    def effective_user(self) -> str | None:
        """User external commands run as, or None for the current user."""
        return self.service_user if self.run_as_service_user else None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
