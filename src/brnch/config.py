# src/brnch/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing but paths, log level and the save mode is configurable; there are no CLI flags.
- The default data dir follows the XDG layout: $XDG_DATA_HOME/brnch or ~/.local/share/brnch.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "BRNCH"
APP_DIRNAME = "brnch"


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


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def default_data_home() -> Path:
    return _env_path("XDG_DATA_HOME", Path.home() / ".local" / "share")


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    log_dir: Path

    # ---- Persistence ----
    background_save: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), APP_DIRNAME).strip() or APP_DIRNAME
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"

        data_dir = _env_path(_k("DATA_DIR"), default_data_home() / APP_DIRNAME)
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        background_save = _env_bool(_k("BACKGROUND_SAVE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            log_dir=log_dir,
            background_save=background_save,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # .env only fills variables that are not already set in the environment.
    load_dotenv(override=False)
    return Settings.from_env()
