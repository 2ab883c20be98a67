"""Configuration package."""
from space_cli.config.settings import (
    Settings,
    config_path,
    get_settings,
    load_settings,
    reset_settings,
    save_settings,
)

__all__ = [
    "Settings",
    "config_path",
    "get_settings",
    "load_settings",
    "reset_settings",
    "save_settings",
]
