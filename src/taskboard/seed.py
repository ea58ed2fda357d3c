# src/taskboard/seed.py

"""Demo data: three users and five tasks, plus a full wipe."""

from __future__ import annotations

import logging
from datetime import date

from .core.state import AppState
from .tasks.task_models import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS: tuple[tuple[str, str], ...] = (
    ("alice@example.com", "Alice Johnson"),
    ("bob@example.com", "Bob Smith"),
    ("charlie@example.com", "Charlie Brown"),
)

# (name, description, priority, status, due date, assignee email, creator email)
DEMO_TASKS: tuple[tuple[str, str, TaskPriority, TaskStatus, date, str, str], ...] = (
    (
        "Optimize database queries",
        "Improve performance of slow database queries",
        TaskPriority.LOW,
        TaskStatus.DONE,
        date(2024, 8, 25),
        "alice@example.com",
        "charlie@example.com",
    ),
    (
        "Design user interface",
        "Create mockups for the new dashboard interface",
        TaskPriority.HIGH,
        TaskStatus.REVIEW,
        date(2024, 9, 10),
        "charlie@example.com",
        "bob@example.com",
    ),
    (
        "Fix login bug",
        "Resolve authentication issues on the login page",
        TaskPriority.HIGH,
        TaskStatus.TODO,
        date(2024, 9, 15),
        "alice@example.com",
        "bob@example.com",
    ),
    (
        "Update documentation",
        "Update API documentation with new endpoints",
        TaskPriority.MEDIUM,
        TaskStatus.IN_PROGRESS,
        date(2024, 9, 20),
        "bob@example.com",
        "alice@example.com",
    ),
    (
        "Implement search functionality",
        "Add search and filter capabilities to task management",
        TaskPriority.HIGH,
        TaskStatus.IN_PROGRESS,
        date(2024, 9, 12),
        "bob@example.com",
        "alice@example.com",
    ),
)


def seed_demo_data(state: AppState) -> tuple[int, int]:
    """
    Create the demo users/tasks. Existing users are reused; tasks are only
    added to an empty task table. Returns (users created, tasks created).
    """
    users_created = 0
    ids: dict[str, int] = {}
    for email, name in DEMO_USERS:
        existing = state.user_store.get_user_by_email(email)
        if existing is not None:
            ids[email] = existing.id
            continue
        ids[email] = state.user_store.create_user(email=email, password=DEMO_PASSWORD, name=name)
        users_created += 1

    tasks_created = 0
    if state.task_store.count_tasks() == 0:
        for name, description, priority, status, due, assignee, creator in DEMO_TASKS:
            state.task_store.create_task(
                name=name,
                description=description,
                priority=priority,
                status=status,
                due_date=due,
                assignee_id=ids[assignee],
                creator_id=ids[creator],
            )
            tasks_created += 1

    logger.info("Seeded demo data users=%d tasks=%d", users_created, tasks_created)
    return users_created, tasks_created


def clear_database(state: AppState) -> int:
    """Delete tasks, then sessions and users. Returns the number of tasks removed."""
    removed = state.task_store.clear()
    state.user_store.clear()
    state.session_token = None
    logger.info("Database cleared (tasks removed=%d)", removed)
    return removed
