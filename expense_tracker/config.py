"""
Application Configuration.

Pydantic Settings model for the Expense Tracker client.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Remote API ---
    API_URL: str = "https://expense-tracker.checkpoint.lat"
    REQUEST_TIMEOUT_S: float = 15.0

    # --- Token persistence ---
    TOKEN_STORAGE_KEY: str = "token"
    TOKEN_DB_PATH: str = "expense_tracker_local.db"
    TOKEN_SALT_PATH: str = str(Path.home() / ".expense_tracker_salt")
    TOKEN_KDF_ITERATIONS: int = 600_000

    # --- Screens ---
    # The dashboard loads every category for its filter control.
    CATEGORY_LOAD_LIMIT: int = 100_000

    # --- Logging ---
    LOG_FILE: str = "expense_tracker.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit a startup warning when running on defaults only.

        Pydantic silently falls back to defaults when ``.env`` is missing,
        so operators get a log line pointing at the API in use.
        """
        _log = logging.getLogger("expense_tracker.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found; configuration loaded from "
                "environment variables or defaults (API_URL=%s).",
                self.API_URL,
            )

        return self

    @property
    def api_base_url(self) -> str:
        """``API_URL`` without a trailing slash."""
        return self.API_URL.rstrip("/")


# ---------------------------------------------------------------------------
# Module-level factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` instance.

    On first call, creates an ``AppConfig`` (reading from ``.env``).
    Subsequent calls return the same instance.

    Prefer direct constructor injection of ``AppConfig`` in new code;
    this factory exists for the logger, which is created before the
    composition root has a config to hand over.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
