# src/taskboard/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from datetime import date
from pathlib import Path
from typing import Any

from ..dates import date_from_db, format_date_for_input
from ..storage import SQLiteDatabase
from .task_filter import FilterCriteria, Page, filter_tasks, paginate
from .task_models import OPEN_STATUSES, Task, TaskPriority, TaskStatus, TeamStats

logger = logging.getLogger(__name__)

_SELECT_TASKS = """
    SELECT t.*, u.name AS assignee_name
    FROM tasks t
    LEFT JOIN users u ON u.id = t.assignee_id
"""

_UNSET: Any = object()


class TaskStore:
    """
    SQLite task store.

    Each method opens its own connection (see SQLiteDatabase). Invalid input
    raises ValueError; sqlite3 errors propagate to the caller.
    """

    def __init__(self, db: SQLiteDatabase | str | Path = "taskboard.sqlite3") -> None:
        self._db = db if isinstance(db, SQLiteDatabase) else SQLiteDatabase(db)
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db.path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    @staticmethod
    def _check_status(status: TaskStatus | str) -> TaskStatus:
        parsed = TaskStatus.parse(status)
        if parsed is None:
            raise ValueError(f"Invalid status: {status}")
        return parsed

    @staticmethod
    def _check_priority(priority: TaskPriority | str) -> TaskPriority:
        parsed = TaskPriority.parse(priority)
        if parsed is None:
            raise ValueError(f"Invalid priority: {priority}")
        return parsed

    @staticmethod
    def _date_to_str(value: date | str | None) -> str | None:
        if value is None or value == "":
            return None
        return format_date_for_input(value)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            name=str(row["name"] or ""),
            description=row["description"],
            status=TaskStatus.from_db(row["status"]),
            priority=TaskPriority.from_db(row["priority"]),
            due_date=date_from_db(row["due_date"]),
            assignee_id=int(row["assignee_id"]) if row["assignee_id"] is not None else None,
            assignee_name=row["assignee_name"],
            creator_id=int(row["creator_id"]) if row["creator_id"] is not None else None,
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._db.connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def create_task(
        self,
        *,
        name: str,
        description: str | None = None,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        status: TaskStatus | str = TaskStatus.TODO,
        due_date: date | str | None = None,
        creator_id: int | None = None,
        assignee_id: int | None = None,
    ) -> int:
        if not name or not name.strip():
            raise ValueError("Title is required.")
        status_v = self._check_status(status)
        priority_v = self._check_priority(priority)

        now = time.time()
        conn = self._db.connect()
        try:
            cur = conn.execute(
                """
                INSERT INTO tasks(
                    name, description, status, priority, due_date,
                    assignee_id, creator_id, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    name.strip(),
                    description,
                    status_v.value,
                    priority_v.value,
                    self._date_to_str(due_date),
                    assignee_id,
                    creator_id,
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug(
                "Task created id=%s status=%s priority=%s assignee=%s",
                task_id,
                status_v.value,
                priority_v.value,
                assignee_id,
            )
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._db.connect()
        try:
            row = conn.execute(_SELECT_TASKS + " WHERE t.id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks, newest first (created_at desc, then id desc)."""
        conn = self._db.connect()
        try:
            rows = conn.execute(_SELECT_TASKS + " ORDER BY t.created_at DESC, t.id DESC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def search_tasks(
        self,
        criteria: FilterCriteria,
        *,
        page: int = 1,
        page_size: int = 10,
        today: date | None = None,
    ) -> Page[Task]:
        """Load everything, run the evaluator in-process, then paginate."""
        matched = filter_tasks(self.list_tasks(), criteria, today=today)
        return paginate(matched, page=page, page_size=page_size)

    def update_task_status(self, task_id: int, status: TaskStatus | str) -> bool:
        status_v = self._check_status(status)
        conn = self._db.connect()
        try:
            cur = conn.execute(
                "UPDATE tasks SET status = ?, updated_at = ? WHERE id = ?",
                (status_v.value, time.time(), int(task_id)),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def update_task(
        self,
        task_id: int,
        *,
        name: str | None = None,
        description: str | None = _UNSET,
        priority: TaskPriority | str | None = None,
        status: TaskStatus | str | None = None,
        due_date: date | str | None = _UNSET,
        assignee_id: int | None = _UNSET,
    ) -> bool:
        """
        Partial update. description/due_date/assignee_id may be set to None
        explicitly (clears the value); omitting them leaves them unchanged.
        """
        fields: list[str] = []
        params: list[Any] = []

        if name is not None:
            if not name.strip():
                raise ValueError("Title is required.")
            fields.append("name = ?")
            params.append(name.strip())

        if description is not _UNSET:
            fields.append("description = ?")
            params.append(description)

        if priority is not None:
            fields.append("priority = ?")
            params.append(self._check_priority(priority).value)

        if status is not None:
            fields.append("status = ?")
            params.append(self._check_status(status).value)

        if due_date is not _UNSET:
            fields.append("due_date = ?")
            params.append(self._date_to_str(due_date))

        if assignee_id is not _UNSET:
            fields.append("assignee_id = ?")
            params.append(assignee_id)

        if not fields:
            return self.get_task(task_id) is not None

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        conn = self._db.connect()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_task(self, task_id: int) -> bool:
        conn = self._db.connect()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            deleted = cur.rowcount == 1
            logger.debug("Task delete id=%s deleted=%s", task_id, deleted)
            return deleted
        finally:
            conn.close()

    def team_stats(self) -> TeamStats:
        open_values = [s.value for s in OPEN_STATUSES]
        placeholders = ",".join("?" for _ in open_values)

        conn = self._db.connect()
        try:
            (members,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
            (open_tasks,) = conn.execute(
                f"SELECT COUNT(*) FROM tasks WHERE status IN ({placeholders})",
                open_values,
            ).fetchone()
            (completed,) = conn.execute(
                "SELECT COUNT(*) FROM tasks WHERE status = ?",
                (TaskStatus.DONE.value,),
            ).fetchone()
            top = conn.execute(
                """
                SELECT u.name AS name, COUNT(t.id) AS completed
                FROM users u
                JOIN tasks t ON t.assignee_id = u.id AND t.status = ?
                GROUP BY u.id
                ORDER BY completed DESC, u.id ASC
                LIMIT 1
                """,
                (TaskStatus.DONE.value,),
            ).fetchone()
        finally:
            conn.close()

        return TeamStats(
            total_members=int(members),
            open_tasks=int(open_tasks),
            tasks_completed=int(completed),
            top_performer=top["name"] if top else None,
            top_performer_completed=int(top["completed"]) if top else 0,
        )

    def clear(self) -> int:
        conn = self._db.connect()
        try:
            cur = conn.execute("DELETE FROM tasks")
            conn.commit()
            return int(cur.rowcount)
        finally:
            conn.close()
