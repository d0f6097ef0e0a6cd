"""
FILE: pcrm/config.py
PURPOSE: Centralized settings loaded from environment variables
EXPORTS:
  - Settings (frozen dataclass)
  - get_settings() -> Settings
DEPENDENCIES:
  - os, pathlib, dataclasses (stdlib)
NOTES:
  - Every variable uses the PCRM_ prefix (PCRM_HOME, PCRM_LOG_LEVEL, ...)
  - No variable is required; defaults give a working install
  - get_settings() re-reads the environment on every call
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "PCRM"

DEFAULT_HOME = Path.home() / ".pcrm"
DB_FILENAME = "pcrm.db"
LOG_FILENAME = "pcrm.log"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Paths ----
    data_dir: Path
    db_path: Path
    log_path: Path

    # ---- Logging ----
    log_level: str

    # ---- Board behaviour ----
    due_soon_days: int
    seed_on_first_run: bool

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("HOME"), DEFAULT_HOME)
        due_soon_days = _env_int(_k("DUE_SOON_DAYS"), 3)
        if due_soon_days < 0:
            due_soon_days = 3

        return Settings(
            data_dir=data_dir,
            db_path=data_dir / DB_FILENAME,
            log_path=data_dir / LOG_FILENAME,
            log_level=_env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING",
            due_soon_days=due_soon_days,
            seed_on_first_run=_env_bool(_k("SEED"), True),
        )


def get_settings() -> Settings:
    return Settings.from_env()
