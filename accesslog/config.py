"""
AccessLog - Configuration
===========================

What:  Centralized configuration using Pydantic Settings.
How:   Pydantic Settings reads environment variables (or a .env file),
       validates them and exposes a module-level `settings` object.
Who:   Read by the application factory in accesslog.main. The middleware
       itself takes explicit arguments and never reads settings.
When:  Loaded once at import time; invalid values fail at startup.

Environment variables (case-insensitive):
    ACCESS_LOG_FORMAT       common | combined
    ACCESS_LOGGER_NAME      logger that receives access lines
    ACCESS_LOG_LEVEL        level access lines are emitted at
    ACCESS_LOG_SKIP_PATHS   comma-separated exact paths left unlogged
    LOG_LEVEL               root logging level
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from accesslog.formatters import FORMATTERS

VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _check_level(value: str) -> str:
    upper = value.upper()
    if upper not in VALID_LEVELS:
        raise ValueError(f"Invalid log level '{value}'. Must be one of: {sorted(VALID_LEVELS)}")
    return upper


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development.
    """

    # ── Access Log ────────────────────────────────────────────────────────
    # Preset formatter name; see accesslog.formatters.FORMATTERS
    access_log_format: str = Field(default="common")

    # Logger handed to the middleware. Handlers attached to it decide where
    # access lines end up (stdout by default, see main.setup_logging).
    access_logger_name: str = Field(default="accesslog.access")

    access_log_level: str = Field(default="INFO")

    # Exact request paths passed through without a log line
    access_log_skip_paths: str = Field(default="")

    @property
    def skip_paths_list(self) -> List[str]:
        """Splits the comma-separated skip paths into a list."""
        return [path.strip() for path in self.access_log_skip_paths.split(",") if path.strip()]

    @field_validator("access_log_format")
    @classmethod
    def validate_access_log_format(cls, v: str) -> str:
        """Ensures the format names a registered preset."""
        lower = v.lower()
        if lower not in FORMATTERS:
            raise ValueError(
                f"Invalid access_log_format '{v}'. Must be one of: {sorted(FORMATTERS)}"
            )
        return lower

    # ── Logging ───────────────────────────────────────────────────────────
    # Root level for application logs (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = Field(default="INFO")

    @field_validator("log_level", "access_log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log levels are valid Python logging level names."""
        return _check_level(v)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = Settings()
