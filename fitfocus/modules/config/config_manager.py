"""
Centralized configuration management using Pydantic models.

Settings are read from environment variables and an optional ``.env`` file.
Paths are resolved relative to the user's home directory when given with ``~``.
"""

import logging
from pathlib import Path
from typing import Dict, Literal, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.fitfocus"


class AppSettings(BaseSettings):
    """Main application settings loaded from environment variables."""

    # Application settings
    app_name: str = "FitFocus"
    debug_mode: bool = False
    # Logging settings
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    app_log_dir: str = Field(
        default=f"{DEFAULT_DATA_DIR}/logs",
        validation_alias=AliasChoices("APP_LOG_DIR"),
    )
    feature_metrics_logging_enabled: bool = Field(
        False,
        description="Enable metrics logging for session activity (counts and types only)",
        validation_alias=AliasChoices("FEATURE_METRICS_LOGGING_ENABLED"),
    )

    # Local session cache
    session_cache_backend: Literal["file", "sql", "memory"] = Field(
        default="file",
        description="Local cache implementation: JSON file, SQL structured store, or in-memory",
        validation_alias=AliasChoices("SESSION_CACHE_BACKEND"),
    )
    session_cache_dir: str = Field(
        default=DEFAULT_DATA_DIR,
        description="Private document directory holding the session cache",
        validation_alias=AliasChoices("SESSION_CACHE_DIR", "APP_DATA_DIR"),
    )
    session_cache_file_name: str = "bjj_sessions.json"
    # Defaults to sqlite:///<session_cache_dir>/bjj_sessions.db when unset
    session_cache_db_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SESSION_CACHE_DB_URL"),
    )

    # Remote session collection
    remote_collection_name: str = "bjj_sessions"
    use_mock_remote: bool = Field(
        default=False,
        description="Use the in-process session collection instead of an injected remote client",
        validation_alias=AliasChoices("USE_MOCK_REMOTE"),
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @model_validator(mode='after')
    def validate_cache_file_name(self):
        """The cache file must live directly inside the cache directory."""
        if Path(self.session_cache_file_name).name != self.session_cache_file_name:
            raise ValueError("session_cache_file_name must be a bare file name, not a path")
        return self

    @property
    def session_cache_path(self) -> Path:
        return Path(self.session_cache_dir).expanduser() / self.session_cache_file_name

    @property
    def resolved_session_cache_db_url(self) -> str:
        if self.session_cache_db_url:
            return self.session_cache_db_url
        return f"sqlite:///{Path(self.session_cache_dir).expanduser() / 'bjj_sessions.db'}"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "env_prefix": "",
        "populate_by_name": True,
    }


class ConfigManager:
    """Centralized configuration manager with proper error handling."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._app_settings: Optional[AppSettings] = settings

    @property
    def app_settings(self) -> AppSettings:
        """Get application settings (cached)."""
        if self._app_settings is None:
            self._app_settings = AppSettings()
            logger.info("Application settings loaded successfully")
        return self._app_settings

    def reload_configs(self) -> None:
        """Drop cached settings so the next access re-reads the environment."""
        self._app_settings = None
        logger.info("Configuration cache cleared")

    def validate_config(self) -> Dict[str, bool]:
        """Report which parts of the configuration are usable."""
        status = {"app_settings": False, "session_cache_dir": False}
        try:
            settings = self.app_settings
            status["app_settings"] = True
        except Exception as e:
            logger.error(f"App settings validation failed: {e}", exc_info=True)
            return status

        cache_dir = Path(settings.session_cache_dir).expanduser()
        status["session_cache_dir"] = not cache_dir.exists() or cache_dir.is_dir()
        if not status["session_cache_dir"]:
            logger.warning("Session cache dir %s exists but is not a directory", cache_dir)
        return status


# Global configuration manager instance
config_manager = ConfigManager()


def get_app_settings() -> AppSettings:
    """Get application settings."""
    return config_manager.app_settings
