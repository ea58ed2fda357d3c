# src/taskboard/tasks/task_board.py

"""
List and kanban views over (already filtered) tasks.

Plain text only; the console prints whatever these return.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..dates import format_date_for_display
from .task_models import Task, TaskStatus, normalize_key

logger = logging.getLogger(__name__)

COLUMN_TITLES: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.REVIEW: "Review",
    TaskStatus.DONE: "Done",
}

MIN_COL_WIDTH = 18
SEP = " | "


def group_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    """Kanban columns in board order; tasks with an unknown status are left out."""
    columns: dict[TaskStatus, list[Task]] = {s: [] for s in TaskStatus}
    unmatched = 0
    for task in tasks:
        key = normalize_key(getattr(task, "status", None))
        try:
            status = TaskStatus(key)
        except ValueError:
            unmatched += 1
            logger.debug(
                "Board: task id=%s name=%r has unknown status %r",
                getattr(task, "id", None),
                getattr(task, "name", None),
                getattr(task, "status", None),
            )
            continue
        columns[status].append(task)

    if unmatched:
        logger.debug("Board: %d task(s) without a column", unmatched)
    return columns


def _due_label(task: Task) -> str:
    return format_date_for_display(task.due_date) if task.due_date else "-"


def render_list(tasks: Iterable[Task]) -> str:
    rows = [
        (
            f"#{t.id}",
            t.name,
            str(t.status),
            str(t.priority),
            _due_label(t),
            t.assignee_label,
        )
        for t in tasks
    ]
    if not rows:
        return "No tasks found."

    header = ("ID", "Name", "Status", "Priority", "Due", "Assignee")
    widths = [max(len(header[i]), *(len(r[i]) for r in rows)) for i in range(len(header))]

    def fmt(cells: tuple[str, ...]) -> str:
        return "  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip()

    lines = [fmt(header), fmt(tuple("-" * w for w in widths))]
    lines.extend(fmt(r) for r in rows)
    return "\n".join(lines)


def _card(task: Task) -> str:
    return f"#{task.id} {task.name} [{task.priority}]"


def render_board(tasks: Iterable[Task]) -> str:
    columns = group_by_status(tasks)
    cells: dict[TaskStatus, list[str]] = {
        s: ([_card(t) for t in col] or ["(empty)"]) for s, col in columns.items()
    }
    widths = {
        s: max(MIN_COL_WIDTH, len(f"{COLUMN_TITLES[s]} ({len(columns[s])})"), *(len(c) for c in cells[s]))
        for s in TaskStatus
    }

    header = SEP.join(f"{COLUMN_TITLES[s]} ({len(columns[s])})".ljust(widths[s]) for s in TaskStatus)
    rule = SEP.join("-" * widths[s] for s in TaskStatus)
    lines = [header.rstrip(), rule]

    rows = max(len(c) for c in cells.values())
    for r in range(rows):
        row = SEP.join(
            (cells[s][r] if r < len(cells[s]) else "").ljust(widths[s]) for s in TaskStatus
        )
        lines.append(row.rstrip())
    return "\n".join(lines)


def render_page_footer(current_page: int, total_pages: int, total_count: int) -> str:
    if total_pages <= 1:
        return f"{total_count} task(s)."
    return f"Page {current_page}/{total_pages} - {total_count} task(s). Use /list <page>."
