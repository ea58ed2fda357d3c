# src/taskboard/tasks/task_api.py

"""
Task actions used by the presentation layer.

Every function takes the AppState explicitly, never raises for storage
failures and returns an ActionResult carrying a user-facing message.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..core.result import ActionResult
from ..core.state import AppState
from .task_filter import FilterCriteria
from .task_models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED = "Not authenticated."
TITLE_REQUIRED = "Title is required."


def create_task(
    state: AppState,
    *,
    name: str,
    description: str | None = None,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    status: TaskStatus | str = TaskStatus.TODO,
    due_date: date | str | None = None,
    assignee_id: int | None = None,
) -> ActionResult:
    try:
        user = state.current_user()
    except Exception:
        logger.exception("create_task: session lookup failed")
        return ActionResult.failure("Failed to create task.")
    if user is None:
        return ActionResult.failure(NOT_AUTHENTICATED)
    if not name or not name.strip():
        return ActionResult.failure(TITLE_REQUIRED)

    try:
        task_id = state.task_store.create_task(
            name=name,
            description=description,
            priority=priority,
            status=status,
            due_date=due_date,
            creator_id=user.id,
            assignee_id=assignee_id,
        )
    except ValueError as e:
        return ActionResult.failure(str(e))
    except Exception:
        logger.exception("create_task failed name=%r creator=%s", name, user.id)
        return ActionResult.failure("Failed to create task.")

    logger.info("Task %s created by user_id=%s", task_id, user.id)
    return ActionResult.success(task_id, "Task created successfully!")


def get_all_tasks(state: AppState) -> ActionResult:
    try:
        return ActionResult.success(state.task_store.list_tasks())
    except Exception:
        logger.exception("list_tasks failed")
        return ActionResult.failure("Failed to fetch tasks.", value=[])


def search_tasks(
    state: AppState,
    criteria: FilterCriteria | None = None,
    *,
    page: int = 1,
    page_size: int | None = None,
    today: date | None = None,
) -> ActionResult:
    """Search with the given criteria (defaults to the session's filter state)."""
    if criteria is None:
        criteria = state.filters
    if page_size is None:
        page_size = state.page_size
    try:
        result = state.task_store.search_tasks(
            criteria, page=page, page_size=page_size, today=today
        )
    except Exception:
        logger.exception("search_tasks failed criteria=%s", criteria.describe())
        return ActionResult.failure("Failed to search tasks.")
    logger.debug(
        "search_tasks %s -> %d match(es)", criteria.describe(), result.total_count
    )
    return ActionResult.success(result)


def delete_task(state: AppState, task_id: int) -> ActionResult:
    try:
        deleted = state.task_store.delete_task(task_id)
    except Exception:
        logger.exception("delete_task failed task_id=%s", task_id)
        return ActionResult.failure("Failed to delete task.")
    if not deleted:
        return ActionResult.failure(f"Task {task_id} not found.")
    return ActionResult.success(task_id, f"Task {task_id} deleted.")


def update_task_status(state: AppState, task_id: int, status: TaskStatus | str) -> ActionResult:
    try:
        updated = state.task_store.update_task_status(task_id, status)
    except ValueError as e:
        return ActionResult.failure(str(e))
    except Exception:
        logger.exception("update_task_status failed task_id=%s status=%s", task_id, status)
        return ActionResult.failure("Failed to update task status.")
    if not updated:
        return ActionResult.failure(f"Task {task_id} not found.")
    return ActionResult.success(task_id, f"Task {task_id} moved to {TaskStatus.parse(status)}.")


def update_task(state: AppState, task_id: int, **fields: Any) -> ActionResult:
    """
    Edit form submission. Accepts name, description, priority, status,
    due_date, assignee_id; a present-but-empty name is rejected.
    """
    try:
        user = state.current_user()
    except Exception:
        logger.exception("update_task: session lookup failed task_id=%s", task_id)
        return ActionResult.failure("Failed to update task.")
    if user is None:
        return ActionResult.failure(NOT_AUTHENTICATED)
    if "name" in fields and not (fields["name"] or "").strip():
        return ActionResult.failure(TITLE_REQUIRED)

    try:
        updated = state.task_store.update_task(task_id, **fields)
    except ValueError as e:
        return ActionResult.failure(str(e))
    except Exception:
        logger.exception("update_task failed task_id=%s fields=%s", task_id, sorted(fields))
        return ActionResult.failure("Failed to update task.")
    if not updated:
        return ActionResult.failure(f"Task {task_id} not found.")
    return ActionResult.success(task_id, "Task updated successfully!")


def get_team_stats(state: AppState) -> ActionResult:
    try:
        return ActionResult.success(state.task_store.team_stats())
    except Exception:
        logger.exception("team_stats failed")
        return ActionResult.failure("Failed to fetch team statistics.")


def get_all_users(state: AppState) -> ActionResult:
    try:
        return ActionResult.success(state.user_store.list_users())
    except Exception:
        logger.exception("list_users failed")
        return ActionResult.failure("Failed to fetch users.", value=[])
