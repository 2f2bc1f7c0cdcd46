"""Configuration module."""

from .config_manager import AppSettings, ConfigManager, config_manager, get_app_settings

__all__ = [
    "AppSettings",
    "ConfigManager",
    "config_manager",
    "get_app_settings",
]
