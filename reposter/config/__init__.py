"""Configuration module for the reposter bot."""

from .settings import Settings, ConfigError, load_settings

__all__ = [
    "Settings",
    "ConfigError",
    "load_settings"
]
