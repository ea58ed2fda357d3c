# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.auth.user_store import UserStore
from taskboard.core.state import AppState
from taskboard.storage import SQLiteDatabase
from taskboard.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the action modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        console_enabled=False,
        page_size=10,
        demo_email="alice@example.com",
        # Fast hashing; the scheme is the same.
        password_iterations=1,
        data_dir=tmp_path,
        db_path=tmp_path / "taskboard.sqlite3",
        session_path=tmp_path / "session",
    )


@pytest.fixture()
def db(settings: SimpleNamespace) -> SQLiteDatabase:
    return SQLiteDatabase(settings.db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, db: SQLiteDatabase) -> AppState:
    """
    AppState wired with real SQLite stores in tmp_path.

    NOTE: the stores are real because their SQL is part of what we want to test.
    """
    return AppState(
        settings=settings,
        task_store=TaskStore(db),
        user_store=UserStore(db, password_iterations=settings.password_iterations),
    )


@pytest.fixture()
def alice(state: AppState) -> int:
    """Create Alice and log her in; returns her user id."""
    user_id = state.user_store.create_user(
        email="alice@example.com", password="password123", name="Alice Johnson"
    )
    state.session_token = state.user_store.create_session(user_id)
    return user_id
