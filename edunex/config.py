"""
Application Configuration.

Pydantic Settings model for the EduNex desktop client.  All
configuration is loaded from environment variables and ``.env`` files.
Inject an ``AppConfig`` instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")
    PROFILE_TABLE: str = "users"

    # --- Provider calls ---
    AUTH_CALL_TIMEOUT_S: float = 15.0
    POSTGREST_TIMEOUT_S: int = 10
    AUTH_WORKER_THREADS: int = 4

    # --- Persisted auth session (encrypted) ---
    SESSION_STORE_PATH: Path = Path.home() / ".edunex" / "session.bin"

    # --- UI ---
    TOAST_DURATION_MS: int = 4000
    APP_TITLE: str = "EduNex"

    # --- Logging ---
    LOG_FILE: str = "edunex.log"
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("AUTH_CALL_TIMEOUT_S")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("AUTH_CALL_TIMEOUT_S must be greater than zero")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return level

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Log a startup warning when the Supabase project is not configured.

        Without a URL and anon key the client runs offline and every
        sign-in attempt fails with a provider-unavailable error.
        """
        _log = logging.getLogger("edunex.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found; configuration loaded from "
                "environment variables or defaults."
            )

        if not self.SUPABASE_URL or not self.SUPABASE_ANON_KEY.get_secret_value():
            _log.warning(
                "SUPABASE_URL or SUPABASE_ANON_KEY is empty; "
                "authentication is unavailable."
            )

        return self

    @property
    def log_level_value(self) -> int:
        """Numeric ``logging`` level for ``LOG_LEVEL``."""
        return logging.getLevelNamesMapping()[self.LOG_LEVEL]


# ---------------------------------------------------------------------------
# Module-level cached factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` instance, creating it on first use.

    Prefer constructor injection of ``AppConfig`` in new code; this
    factory exists for the logger, which is created before the
    composition root has a config to hand out.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
