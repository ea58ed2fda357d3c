# src/taskboard/tasks/task_filter.py

from __future__ import annotations

"""
Task filtering.

One evaluator for every view: free-text search over name/description plus
status and priority sets, and the optional assignee / due-date narrowing.

Contract:
- output keeps the input order (stable filter, no sorting) and is a new list
- an empty status set or priority set matches nothing
- unknown status/priority values never match
- a task with a missing or malformed field does not match; nothing raises

The filter state is an explicit, immutable FilterCriteria value. Callers keep
it (e.g. on AppState) and replace it on every change.
"""

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .task_models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_STATUSES: frozenset[TaskStatus] = frozenset(TaskStatus)
ALL_PRIORITIES: frozenset[TaskPriority] = frozenset(TaskPriority)

ASSIGNEE_ALL = "all"
ASSIGNEE_UNASSIGNED = "unassigned"

_MISSING = object()


class DueFilter(StrEnum):
    ANY = "any"
    OVERDUE = "overdue"
    THIS_WEEK = "this_week"


@dataclass(slots=True, frozen=True)
class FilterCriteria:
    search_text: str = ""
    statuses: frozenset[TaskStatus] = ALL_STATUSES
    priorities: frozenset[TaskPriority] = ALL_PRIORITIES
    # "all" | "unassigned" | user id as digits
    assignee: str = ASSIGNEE_ALL
    due: DueFilter = DueFilter.ANY

    @property
    def query(self) -> str:
        return (self.search_text or "").strip().casefold()

    def has_active_filters(self) -> bool:
        return (
            self.query != ""
            or self.statuses != ALL_STATUSES
            or self.priorities != ALL_PRIORITIES
            or self.assignee != ASSIGNEE_ALL
            or self.due != DueFilter.ANY
        )

    def with_search(self, text: str) -> FilterCriteria:
        return replace(self, search_text=text or "")

    def toggle_status(self, status: TaskStatus) -> FilterCriteria:
        return replace(self, statuses=self.statuses ^ {status})

    def toggle_priority(self, priority: TaskPriority) -> FilterCriteria:
        return replace(self, priorities=self.priorities ^ {priority})

    def with_statuses(self, statuses: Iterable[TaskStatus]) -> FilterCriteria:
        return replace(self, statuses=frozenset(statuses))

    def with_priorities(self, priorities: Iterable[TaskPriority]) -> FilterCriteria:
        return replace(self, priorities=frozenset(priorities))

    def with_assignee(self, assignee: str | int | None) -> FilterCriteria:
        if assignee is None:
            value = ASSIGNEE_UNASSIGNED
        else:
            value = str(assignee).strip().lower() or ASSIGNEE_ALL
        if value not in (ASSIGNEE_ALL, ASSIGNEE_UNASSIGNED) and not value.isdigit():
            raise ValueError(f"Invalid assignee filter: {assignee!r}")
        return replace(self, assignee=value)

    def with_due(self, due: DueFilter | str) -> FilterCriteria:
        return replace(self, due=DueFilter(due))

    def reset(self) -> FilterCriteria:
        return FilterCriteria()

    def describe(self) -> str:
        def _names(values: frozenset[Any], universe: frozenset[Any]) -> str:
            if values == universe:
                return "all"
            if not values:
                return "none"
            return ",".join(sorted(str(v) for v in values))

        return (
            f'search="{self.search_text.strip()}" '
            f"status={_names(self.statuses, ALL_STATUSES)} "
            f"priority={_names(self.priorities, ALL_PRIORITIES)} "
            f"assignee={self.assignee} due={self.due.value}"
        )


@dataclass(slots=True, frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_count: int = 0
    page_size: int = 10


def _field(task: Any, name: str) -> Any:
    if isinstance(task, Mapping):
        return task.get(name, _MISSING)
    return getattr(task, name, _MISSING)


def _text(value: Any) -> str | None:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return None


def end_of_week(today: date) -> date:
    """The coming Sunday; on a Sunday, the Sunday after."""
    days_since_sunday = (today.weekday() + 1) % 7
    return today + timedelta(days=7 - days_since_sunday)


def _matches_search(task: Any, query: str) -> bool:
    if not query:
        return True
    name = _text(_field(task, "name"))
    raw_description = _field(task, "description")
    # An absent description searches like an empty one; an absent name never matches.
    description = _text(None if raw_description is _MISSING else raw_description)
    if name is None or description is None:
        return False
    return query in name.casefold() or query in description.casefold()


def _matches_assignee(task: Any, assignee: str) -> bool:
    if assignee == ASSIGNEE_ALL:
        return True
    assignee_id = _field(task, "assignee_id")
    if assignee_id is _MISSING:
        return False
    if assignee == ASSIGNEE_UNASSIGNED:
        return assignee_id is None
    return isinstance(assignee_id, int) and str(assignee_id) == assignee


def _matches_due(task: Any, due: DueFilter, today: date) -> bool:
    if due == DueFilter.ANY:
        return True
    due_date = _field(task, "due_date")
    if not isinstance(due_date, date):
        return False
    if due == DueFilter.OVERDUE:
        return due_date < today and _field(task, "status") != TaskStatus.DONE
    return today <= due_date <= end_of_week(today)


def task_matches(task: Any, criteria: FilterCriteria, *, today: date | None = None) -> bool:
    try:
        status = _field(task, "status")
        priority = _field(task, "priority")
        if not isinstance(status, str) or status not in ALL_STATUSES or status not in criteria.statuses:
            return False
        if not isinstance(priority, str) or priority not in ALL_PRIORITIES or priority not in criteria.priorities:
            return False
        if not _matches_search(task, criteria.query):
            return False
        if not _matches_assignee(task, criteria.assignee):
            return False
        return _matches_due(task, criteria.due, today or date.today())
    except Exception:
        # Malformed objects (odd __eq__/__hash__, broken properties) just don't match.
        logger.debug("task_matches: treating malformed task as non-matching", exc_info=True)
        return False


def filter_tasks(
    tasks: Iterable[T], criteria: FilterCriteria, *, today: date | None = None
) -> list[T]:
    """Ordered subsequence of `tasks` that satisfies `criteria`."""
    if today is None:
        today = date.today()
    return [t for t in tasks if task_matches(t, criteria, today=today)]


def filter_tasks_by(
    tasks: Iterable[T],
    search_text: str = "",
    statuses: Iterable[TaskStatus | str] = ALL_STATUSES,
    priorities: Iterable[TaskPriority | str] = ALL_PRIORITIES,
    *,
    assignee: str = ASSIGNEE_ALL,
    due: DueFilter | str = DueFilter.ANY,
    today: date | None = None,
) -> list[T]:
    """
    Keyword form of filter_tasks.

    Status/priority may be given as plain strings; values outside the enums
    never match anything, even when listed here.
    """
    criteria = FilterCriteria(
        search_text=search_text or "",
        statuses=frozenset(statuses),  # type: ignore[arg-type]
        priorities=frozenset(priorities),  # type: ignore[arg-type]
        assignee=assignee,
        due=DueFilter(due),
    )
    return filter_tasks(tasks, criteria, today=today)


def paginate(items: Sequence[T], page: int = 1, page_size: int = 10) -> Page[T]:
    page_size = max(1, int(page_size))
    page = max(1, int(page))
    total = len(items)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        current_page=page,
        total_pages=math.ceil(total / page_size),
        total_count=total,
        page_size=page_size,
    )
