"""Configuration and settings management using pydantic-settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import click
import toml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from space_cli.errors import ConfigError


APP_NAME = "space"
CONFIG_FILENAME = "space.toml"

DEFAULT_ENDPOINT = "https://hyjboblkjeevkzaqsyxe.supabase.co"
# Public anonymous key of the default endpoint
DEFAULT_APIKEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJpc3MiOiJzdXBhYmFzZSIsInJlZiI6Imh5amJvYmxramVldmt6YXFzeXhlIiwicm9sZSI6ImFub24iLCJpYXQiOjE2NTQwMTEyNTgsImV4cCI6MTk2OTU4NzI1OH0."
    "L20s98fiTqfPWyTTSe-zjgoovQYhkJGKE7K8h9_-drY"
)

# Keys persisted to the config file
PERSISTED_FIELDS = ("apikey", "endpoint", "authorization")


class Settings(BaseSettings):
    """Local CLI settings: config file values, overridden by environment."""

    model_config = SettingsConfigDict(
        env_prefix="SPACE_",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="Base URL of the storage and catalog services",
    )
    apikey: str = Field(
        default=DEFAULT_APIKEY,
        description="API key sent to the catalog",
    )
    authorization: str = Field(
        default="",
        description="User token sent as bearer authorization",
    )

    # Runtime
    timeout: int = Field(default=30, description="HTTP timeout in seconds")
    build_timeout: Optional[int] = Field(
        default=None,
        description="Build timeout in seconds (no limit when unset)",
    )
    bucket: str = Field(default="node-files", description="Storage bucket for node files")
    table: str = Field(default="nodes", description="Catalog table for node rows")
    dashboard_url: str = Field(
        default="https://spaceoperator.com/dashboard/nodes",
        description="Base URL of the node pages opened after upload",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Values read from the config file arrive as init kwargs
        return env_settings, init_settings

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Endpoint must be an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate that timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def login_defaults(self) -> Dict[str, str]:
        """Values used to prefill the login prompt."""
        return {"authorization": self.authorization}

    def to_file_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, key) for key in PERSISTED_FIELDS}


def config_dir() -> Path:
    """Per-user config directory, overridable with SPACE_CONFIG_DIR."""
    override = os.environ.get("SPACE_CONFIG_DIR")
    if override:
        return Path(override)
    return Path(click.get_app_dir(APP_NAME))


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def load_settings(path: Optional[Path] = None, required: bool = True) -> Settings:
    """
    Read settings from the config file and the environment.

    Args:
        path: Config file (defaults to ``config_path()``)
        required: Fail unless an authorization token is configured

    Raises:
        ConfigError: If the file is unreadable or invalid, or a required
            token is missing
    """
    path = path or config_path()
    values: Dict[str, Any] = {}

    if path.exists():
        try:
            values = toml.load(path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    if required and not settings.authorization:
        raise ConfigError(f"Not logged in (no token in {path}), run `space login` first")

    return settings


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist endpoint, apikey and authorization as TOML."""
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(toml.dumps(settings.to_file_dict()))
    except OSError as e:
        raise ConfigError(f"Cannot write config {path}: {e}") from e
    return path


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or load the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
