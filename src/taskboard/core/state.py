# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_filter import FilterCriteria
from ..tasks.task_models import User
from .ports import TaskRepo, UserRepo


@dataclass
class AppState:
    """
    Everything one console session needs, passed explicitly to actions/commands.

    `filters` is the current filter state; it is immutable and gets replaced
    (never mutated) when the user changes a filter.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    task_store: TaskRepo
    user_store: UserRepo

    session_token: str | None = None
    filters: FilterCriteria = field(default_factory=FilterCriteria)
    list_page: int = 1

    def current_user(self) -> User | None:
        return self.user_store.get_user_by_session(self.session_token)

    @property
    def page_size(self) -> int:
        return max(1, int(getattr(self.settings, "page_size", 10)))
