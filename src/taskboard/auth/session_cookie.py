# src/taskboard/auth/session_cookie.py

"""
The console's "cookie": the opaque session token kept in a private file so a
restarted console stays logged in.
"""

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from ..core.state import AppState

logger = logging.getLogger(__name__)


def _cookie_path(state: AppState) -> Path | None:
    raw_path = getattr(state.settings, "session_path", None)
    return Path(raw_path) if raw_path else None


def load_session_token(state: AppState) -> str | None:
    path = _cookie_path(state)
    if path is None or not path.exists():
        return None
    try:
        token = path.read_text("utf-8").strip()
    except OSError:
        logger.exception("Failed to read session cookie from %s", path)
        return None
    return token or None


def save_session_token(state: AppState) -> None:
    """Write state.session_token (or remove the file when logged out)."""
    path = _cookie_path(state)
    if path is None:
        return
    try:
        if not state.session_token:
            path.unlink(missing_ok=True)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(state.session_token, "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)
    except OSError:
        logger.exception("Failed to save session cookie to %s", path)
