# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite stores into AppState,
- restores the saved session cookie.
"""

from __future__ import annotations

import logging

from ..auth.session_cookie import load_session_token
from ..auth.user_store import UserStore
from ..config import get_settings
from ..core.state import AppState
from ..storage import SQLiteDatabase
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    db = SQLiteDatabase(settings.db_path)
    state = AppState(
        settings=settings,
        task_store=TaskStore(db),
        user_store=UserStore(
            db, password_iterations=int(getattr(settings, "password_iterations", 200_000))
        ),
    )

    token = load_session_token(state)
    if token and state.user_store.get_user_by_session(token) is not None:
        state.session_token = token
    elif token:
        logger.info("Saved session is no longer valid; starting logged out.")
    return state
