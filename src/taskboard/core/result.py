# src/taskboard/core/result.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class ActionResult:
    """Outcome of a user-facing action: never an exception, always a message."""

    ok: bool
    error: str | None = None
    message: str | None = None
    value: Any = None

    @classmethod
    def success(cls, value: Any = None, message: str | None = None) -> ActionResult:
        return cls(ok=True, error=None, message=message, value=value)

    @classmethod
    def failure(cls, error: str, value: Any = None) -> ActionResult:
        return cls(ok=False, error=error, message=error, value=value)

    @property
    def text(self) -> str:
        return self.message or self.error or ""
