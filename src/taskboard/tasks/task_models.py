# src/taskboard/tasks/task_models.py

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

_SEP_RE = re.compile(r"[\s\-]+")


def normalize_key(raw: object) -> str:
    """Lowercase; whitespace and dash runs become "_" ("In Progress" -> "in_progress")."""
    if raw is None:
        return ""
    return _SEP_RE.sub("_", str(raw).strip().lower())


class TaskStatus(StrEnum):
    """
    Task workflow status (kanban columns, in board order).
    """

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus | None:
        """Strict-ish parse for user input: normalised key or None."""
        key = normalize_key(raw)
        try:
            return cls(key)
        except ValueError:
            return None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus | str:
        """
        Known values come back as the enum; anything else is kept verbatim
        so filters and the board can tell it apart (it never matches).
        """
        return cls.parse(raw) or str(raw or "")


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> TaskPriority | None:
        key = normalize_key(raw)
        try:
            return cls(key)
        except ValueError:
            return None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority | str:
        return cls.parse(raw) or str(raw or "")


OPEN_STATUSES: tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.REVIEW,
)


@dataclass(slots=True)
class Task:
    id: int
    name: str
    description: str | None
    status: str
    priority: str

    due_date: date | None = None

    assignee_id: int | None = None
    assignee_name: str | None = None
    creator_id: int | None = None

    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def assignee_label(self) -> str:
        return self.assignee_name or "Unassigned"


@dataclass(slots=True)
class User:
    id: int
    email: str
    name: str
    created_at: float = 0.0


@dataclass(slots=True, frozen=True)
class TeamStats:
    total_members: int
    open_tasks: int
    tasks_completed: int
    top_performer: str | None = None
    top_performer_completed: int = 0
