"""
Central configuration for happy_mcp.
Uses Pydantic BaseSettings for type-safe configuration from environment variables
prefixed with HAPPY_MCP_ (e.g. HAPPY_MCP_LOG_LEVEL=DEBUG).
"""

import logging
import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to this file (happy_mcp/config.py → project root)
_ENV_FILE = Path(__file__).parent.parent / ".env"

ENV_PREFIX = "HAPPY_MCP_"


def _load_env_file() -> None:
    """
    Copy HAPPY_MCP_* keys from .env into os.environ when they are unset or
    blank in the shell, so a stray empty export does not hide the .env value.
    """
    if not _ENV_FILE.exists():
        return
    from dotenv import dotenv_values
    for key, value in dotenv_values(_ENV_FILE).items():
        if key.startswith(ENV_PREFIX) and value and not os.environ.get(key):
            os.environ[key] = value


_load_env_file()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MCP server identity reported during initialize
    server_name: str = "Happy MCP"
    server_version: str = "1.0.0"

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    logs_dir: str = ""  # empty = console only

    # Transport
    json_response: bool = False  # plain JSON bodies instead of SSE streams

    # ── Timeouts (seconds) ──────────────────────────────────────────────────────
    startup_timeout: float = 10.0
    shutdown_timeout: float = 5.0

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @field_validator("startup_timeout", "shutdown_timeout")
    @classmethod
    def check_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be positive")
        return value


def get_settings() -> "Settings":
    """Return the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


_settings: Settings | None = None

