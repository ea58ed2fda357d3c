# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the action layer.

Actions depend on Protocols instead of the SQLite stores.
This keeps storage swappable and makes testing easier.
"""

from datetime import date
from typing import Any, Protocol

from ..tasks.task_filter import FilterCriteria, Page
from ..tasks.task_models import Task, TeamStats, User


class TaskRepo(Protocol):
    def create_task(
            self,
            *,
            name: str,
            description: str | None = None,
            priority: Any = ...,
            status: Any = ...,
            due_date: date | str | None = None,
            creator_id: int | None = None,
            assignee_id: int | None = None,
    ) -> int: ...

    def get_task(self, task_id: int) -> Task | None: ...
    def list_tasks(self) -> list[Task]: ...
    def search_tasks(
            self,
            criteria: FilterCriteria,
            *,
            page: int = 1,
            page_size: int = 10,
            today: date | None = None,
    ) -> Page[Task]: ...

    def update_task(self, task_id: int, **fields: Any) -> bool: ...
    def update_task_status(self, task_id: int, status: Any) -> bool: ...
    def delete_task(self, task_id: int) -> bool: ...
    def team_stats(self) -> TeamStats: ...
    def count_tasks(self) -> int: ...
    def clear(self) -> int: ...
    def close(self) -> None: ...


class UserRepo(Protocol):
    def create_user(self, *, email: str, password: str, name: str) -> int: ...
    def get_user(self, user_id: int) -> User | None: ...
    def get_user_by_email(self, email: str) -> User | None: ...
    def list_users(self) -> list[User]: ...
    def verify_password(self, email: str, password: str) -> User | None: ...
    def create_session(self, user_id: int) -> str: ...
    def get_user_by_session(self, token: str | None) -> User | None: ...
    def delete_session(self, token: str) -> None: ...
    def count_users(self) -> int: ...
    def clear(self) -> None: ...
