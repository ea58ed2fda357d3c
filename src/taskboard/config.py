# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Code that needs settings takes them injected; get_settings() is the default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


# Local .env never overrides variables already set in the environment.
load_dotenv(override=False)


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
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Presentation ----
    console_enabled: bool
    page_size: int

    # ---- Auth ----
    demo_email: str
    password_iterations: int

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    session_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard") or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        page_size = max(1, _env_int(_k("PAGE_SIZE"), 10))

        demo_email = _env(_k("DEMO_EMAIL"), "alice@example.com").strip().lower()
        password_iterations = max(1, _env_int(_k("PASSWORD_ITERATIONS"), 200_000))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskboard.sqlite3")
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            page_size=page_size,
            demo_email=demo_email,
            password_iterations=password_iterations,
            data_dir=data_dir,
            db_path=db_path,
            session_path=session_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
