# tests/test_config.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from taskboard.config import Settings
from taskboard.logging_setup import _ConsoleNoiseFilter, level_from_name, setup_logging

_VARS = (
    "APP_NAME",
    "LOG_LEVEL",
    "CONSOLE_ENABLED",
    "PAGE_SIZE",
    "DEMO_EMAIL",
    "PASSWORD_ITERATIONS",
    "DATA_DIR",
    "DB_PATH",
    "SESSION_PATH",
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for suffix in _VARS:
        monkeypatch.delenv(f"TASKBOARD_{suffix}", raising=False)
    return monkeypatch


def test_settings_defaults(clean_env) -> None:
    s = Settings.from_env()
    assert s.app_name == "taskboard"
    assert s.console_enabled is True
    assert s.page_size == 10
    assert s.demo_email == "alice@example.com"
    assert s.data_dir == Path(".local/taskboard")
    assert s.db_path == s.data_dir / "taskboard.sqlite3"
    assert s.session_path == s.data_dir / "session"


def test_settings_from_env(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("TASKBOARD_DATA_DIR", str(tmp_path))
    clean_env.setenv("TASKBOARD_CONSOLE_ENABLED", "no")
    clean_env.setenv("TASKBOARD_PAGE_SIZE", "25")
    clean_env.setenv("TASKBOARD_DEMO_EMAIL", " Bob@Example.com ")
    clean_env.setenv("TASKBOARD_PASSWORD_ITERATIONS", "1000")

    s = Settings.from_env()
    assert s.console_enabled is False
    assert s.page_size == 25
    assert s.demo_email == "bob@example.com"
    assert s.password_iterations == 1000
    assert s.db_path == tmp_path / "taskboard.sqlite3"


def test_settings_bad_numbers_fall_back(clean_env) -> None:
    clean_env.setenv("TASKBOARD_PAGE_SIZE", "lots")
    assert Settings.from_env().page_size == 10
    clean_env.setenv("TASKBOARD_PAGE_SIZE", "0")
    assert Settings.from_env().page_size == 1


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_noise_filter() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("taskboard.cli.commands", logging.DEBUG))
    assert not f.filter(_record("taskboard.tasks.task_store", logging.INFO))
    assert f.filter(_record("taskboard.tasks.task_store", logging.WARNING))
    assert not f.filter(_record("taskboard.storage", logging.INFO))
    assert not f.filter(_record("taskboard.auth.user_store", logging.DEBUG))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("urllib3", logging.WARNING))
    assert f.filter(_record("urllib3", logging.ERROR))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    # setup_logging closes whatever it replaces; keep pytest's handlers out of reach.
    for h in saved_handlers:
        root.removeHandler(h)
    try:
        setup_logging(log_dir=tmp_path / "logs", console_level="warning")
        setup_logging(log_dir=tmp_path / "logs", console_level="warning")
        assert len(root.handlers) == 2
        logging.getLogger("taskboard.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "logs" / "taskboard.log").read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name(" WARNING ") == logging.WARNING
    assert level_from_name(logging.ERROR) == logging.ERROR
    assert level_from_name("chatty") == logging.INFO
    assert level_from_name(None, logging.DEBUG) == logging.DEBUG
