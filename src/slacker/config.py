# src/slacker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a local default.
- Optional config_local.py for safe machine-specific overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "SLACKER"

load_dotenv(override=False)


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


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector / feature flags ----
    console_enabled: bool
    notifications_enabled: bool

    # ---- Scheduler ----
    notify_interval_seconds: float

    # ---- Console view ----
    default_sort_mode: str
    suggest_limit: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path
    log_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Slacker") or "Slacker"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)

        notify_interval_seconds = _env_float(_k("NOTIFY_INTERVAL_SECONDS"), 60.0)

        default_sort_mode = _env(_k("SORT_MODE"), "default").strip().lower() or "default"
        suggest_limit = _env_int(_k("SUGGEST_LIMIT"), 8)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/slacker"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "slacker.sqlite3")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            notifications_enabled=notifications_enabled,
            notify_interval_seconds=notify_interval_seconds,
            default_sort_mode=default_sort_mode,
            suggest_limit=suggest_limit,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            log_dir=log_dir,
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
# Prefer .env; use config_local.py only for simple switches.
try:
    import config_local as _config_local  # type: ignore
except ImportError:
    _config_local = None

if _config_local is not None:
    if hasattr(_config_local, "CONSOLE_ENABLED"):
        object.__setattr__(SETTINGS, "console_enabled", bool(_config_local.CONSOLE_ENABLED))  # type: ignore[misc]
    if hasattr(_config_local, "NOTIFICATIONS_ENABLED"):
        object.__setattr__(  # type: ignore[misc]
            SETTINGS, "notifications_enabled", bool(_config_local.NOTIFICATIONS_ENABLED)
        )


def get_settings() -> Settings:
    return SETTINGS
