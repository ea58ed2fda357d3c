# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from datetime import date

import pytest

from taskboard.seed import seed_demo_data
from taskboard.storage import SQLiteDatabase
from taskboard.tasks.task_filter import FilterCriteria
from taskboard.tasks.task_models import TaskPriority, TaskStatus
from taskboard.tasks.task_store import TaskStore


def test_task_create_get_update_delete(db: SQLiteDatabase) -> None:
    store = TaskStore(db)

    task_id = store.create_task(
        name="  Fix login bug ",
        description="Resolve authentication issues",
        priority="high",
        status="In Progress",
        due_date="2024-09-15",
    )
    assert task_id > 0

    t = store.get_task(task_id)
    assert t is not None
    assert t.name == "Fix login bug"
    assert t.status == TaskStatus.IN_PROGRESS
    assert t.priority == TaskPriority.HIGH
    assert t.due_date == date(2024, 9, 15)
    assert t.assignee_id is None
    assert t.assignee_label == "Unassigned"

    assert store.update_task_status(task_id, TaskStatus.DONE) is True
    assert store.get_task(task_id).status == TaskStatus.DONE

    assert store.delete_task(task_id) is True
    assert store.get_task(task_id) is None
    assert store.delete_task(task_id) is False


def test_task_defaults(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    t = store.get_task(store.create_task(name="Plain"))
    assert t.status == TaskStatus.TODO
    assert t.priority == TaskPriority.MEDIUM
    assert t.description is None
    assert t.due_date is None


def test_task_validation(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    with pytest.raises(ValueError, match="Title is required."):
        store.create_task(name="   ")
    with pytest.raises(ValueError, match="Invalid status"):
        store.create_task(name="x", status="blocked")
    with pytest.raises(ValueError, match="Invalid priority"):
        store.create_task(name="x", priority="urgent")
    assert store.count_tasks() == 0


def test_list_tasks_newest_first(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    ids = [store.create_task(name=f"t{i}") for i in range(4)]
    assert [t.id for t in store.list_tasks()] == list(reversed(ids))


def test_update_task_partial_and_clearing(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    task_id = store.create_task(
        name="Docs", description="write docs", priority="low", due_date=date(2024, 9, 20)
    )

    assert store.update_task(task_id, priority="high") is True
    t = store.get_task(task_id)
    assert t.priority == TaskPriority.HIGH
    # Untouched fields stay.
    assert t.description == "write docs"
    assert t.due_date == date(2024, 9, 20)

    assert store.update_task(task_id, description=None, due_date=None) is True
    t = store.get_task(task_id)
    assert t.description is None
    assert t.due_date is None

    # No fields: reports whether the task exists.
    assert store.update_task(task_id) is True
    assert store.update_task(9999) is False
    assert store.update_task(9999, name="Ghost") is False

    with pytest.raises(ValueError):
        store.update_task(task_id, name="  ")
    with pytest.raises(ValueError):
        store.update_task(task_id, status="archived")


def test_assignee_name_comes_from_users(state) -> None:
    bob = state.user_store.create_user(email="bob@example.com", password="pw", name="Bob Smith")
    task_id = state.task_store.create_task(name="Review PR", assignee_id=bob)
    t = state.task_store.get_task(task_id)
    assert t.assignee_id == bob
    assert t.assignee_name == "Bob Smith"
    assert t.assignee_label == "Bob Smith"


def test_unknown_stored_status_is_kept_and_never_matches(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    good = store.create_task(name="good")
    conn = db.connect()
    try:
        conn.execute(
            "INSERT INTO tasks(name, status, priority, created_at, updated_at) "
            "VALUES ('legacy', 'blocked', 'medium', 0, 0)"
        )
        conn.commit()
    finally:
        conn.close()

    statuses = {t.name: t.status for t in store.list_tasks()}
    assert statuses["legacy"] == "blocked"

    page = store.search_tasks(FilterCriteria())
    assert [t.id for t in page.items] == [good]
    assert page.total_count == 1


def test_search_tasks_filters_then_paginates(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    for i in range(12):
        store.create_task(name=f"bug {i}", priority="high" if i % 2 else "low")
    store.create_task(name="feature")

    page1 = store.search_tasks(FilterCriteria(search_text="BUG"), page=1, page_size=5)
    assert page1.total_count == 12
    assert page1.total_pages == 3
    assert page1.current_page == 1
    assert len(page1.items) == 5
    # Newest first.
    assert page1.items[0].name == "bug 11"

    page3 = store.search_tasks(FilterCriteria(search_text="bug"), page=3, page_size=5)
    assert [t.name for t in page3.items] == ["bug 1", "bug 0"]

    high = FilterCriteria(search_text="bug").with_priorities([TaskPriority.HIGH])
    assert store.search_tasks(high, page_size=50).total_count == 6


def test_search_tasks_due_filter(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    late = store.create_task(name="late", due_date="2024-09-10")
    store.create_task(name="late but done", due_date="2024-09-01", status="done")
    soon = store.create_task(name="soon", due_date="2024-09-14")
    store.create_task(name="no date")

    today = date(2024, 9, 11)
    overdue = store.search_tasks(FilterCriteria().with_due("overdue"), today=today)
    assert [t.id for t in overdue.items] == [late]
    this_week = store.search_tasks(FilterCriteria().with_due("this_week"), today=today)
    assert [t.id for t in this_week.items] == [soon]


def test_team_stats_on_demo_data(state) -> None:
    seed_demo_data(state)
    stats = state.task_store.team_stats()
    assert stats.total_members == 3
    assert stats.open_tasks == 4
    assert stats.tasks_completed == 1
    assert stats.top_performer == "Alice Johnson"
    assert stats.top_performer_completed == 1


def test_team_stats_empty(db: SQLiteDatabase) -> None:
    stats = TaskStore(db).team_stats()
    assert (stats.total_members, stats.open_tasks, stats.tasks_completed) == (0, 0, 0)
    assert stats.top_performer is None


def test_clear_removes_all_tasks(db: SQLiteDatabase) -> None:
    store = TaskStore(db)
    store.create_task(name="a")
    store.create_task(name="b")
    assert store.clear() == 2
    assert store.count_tasks() == 0


def test_schema_migration_adds_missing_columns(tmp_path) -> None:
    path = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(path))
    conn.execute(
        "CREATE TABLE tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, created_at REAL NOT NULL)"
    )
    conn.execute("INSERT INTO tasks(name, created_at) VALUES ('old task', 1.0)")
    conn.commit()
    conn.close()

    store = TaskStore(path)
    t = store.list_tasks()[0]
    assert t.name == "old task"
    assert t.status == TaskStatus.TODO
    assert t.priority == TaskPriority.MEDIUM
    assert t.due_date is None
