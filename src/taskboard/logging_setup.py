# src/taskboard/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "taskboard.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Per-call SQL chatter; useful in the file, noise at the prompt.
_QUIET_LOGGERS = ("taskboard.storage", "taskboard.tasks.task_store", "taskboard.auth.user_store")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the prompt readable:
    - taskboard logs pass, except store/storage chatter below WARNING
    - warnings.warn(...) and third-party logs need ERROR
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name in _QUIET_LOGGERS:
            return record.levelno >= logging.WARNING
        if name.startswith("taskboard."):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | int | None, default: int = logging.INFO) -> int:
    """"debug" / "WARNING" / 10 -> logging level; unknown names give `default`."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ConsoleNoiseFilter())
    return handler


def _file_handler(log_dir: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_dir / LOG_FILE_NAME), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskboard",
    console_level: str | int = logging.INFO,
    file_level: str | int = logging.DEBUG,
) -> None:
    """
    Route everything to <log_dir>/taskboard.log and a filtered copy to stderr.

    Levels may be names ("debug") or numbers. Calling it again replaces the
    handlers it installed before instead of stacking new ones.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    root.addHandler(_console_handler(level_from_name(console_level), fmt))
    root.addHandler(_file_handler(Path(log_dir), level_from_name(file_level, logging.DEBUG), fmt))

    logging.captureWarnings(True)
