# tests/test_task_api.py

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from taskboard.tasks import task_api
from taskboard.tasks.task_filter import FilterCriteria
from taskboard.tasks.task_models import TaskPriority, TaskStatus

from .fakes import BrokenRepo


def test_create_task_requires_login(state) -> None:
    res = task_api.create_task(state, name="Anything")
    assert not res.ok
    assert res.error == "Not authenticated."
    assert state.task_store.count_tasks() == 0


def test_create_task_success_and_validation(state, alice) -> None:
    missing = task_api.create_task(state, name="   ")
    assert missing.error == "Title is required."

    bad = task_api.create_task(state, name="x", priority="urgent")
    assert not bad.ok
    assert "Invalid priority" in bad.error

    res = task_api.create_task(state, name="Write tests", description="all of them", priority="high")
    assert res.ok
    assert res.message == "Task created successfully!"

    t = state.task_store.get_task(res.value)
    assert t.creator_id == alice
    assert t.priority == TaskPriority.HIGH


def test_update_task_messages(state, alice) -> None:
    task_id = task_api.create_task(state, name="Draft").value

    ok = task_api.update_task(state, task_id, name="Final", status="review")
    assert ok.message == "Task updated successfully!"
    t = state.task_store.get_task(task_id)
    assert (t.name, t.status) == ("Final", TaskStatus.REVIEW)

    assert task_api.update_task(state, task_id, name="").error == "Title is required."
    assert task_api.update_task(state, 999, name="x").error == "Task 999 not found."

    state.session_token = None
    assert task_api.update_task(state, task_id, name="x").error == "Not authenticated."


def test_status_and_delete(state, alice) -> None:
    task_id = task_api.create_task(state, name="Ship it").value

    moved = task_api.update_task_status(state, task_id, "in progress")
    assert moved.ok
    assert moved.message == f"Task {task_id} moved to in_progress."

    assert "Invalid status" in task_api.update_task_status(state, task_id, "blocked").error
    assert task_api.update_task_status(state, 999, "done").error == "Task 999 not found."

    assert task_api.delete_task(state, task_id).message == f"Task {task_id} deleted."
    assert task_api.delete_task(state, task_id).error == f"Task {task_id} not found."


def test_search_uses_session_filters_by_default(state, alice) -> None:
    task_api.create_task(state, name="Fix login bug", priority="high")
    task_api.create_task(state, name="Write docs", priority="low")

    state.filters = FilterCriteria(search_text="login")
    page = task_api.search_tasks(state).value
    assert [t.name for t in page.items] == ["Fix login bug"]

    # Explicit criteria win over the session's.
    page = task_api.search_tasks(state, FilterCriteria().with_priorities([TaskPriority.LOW])).value
    assert [t.name for t in page.items] == ["Write docs"]


def test_search_page_size_defaults_to_settings(state, alice) -> None:
    state.settings.page_size = 2
    for i in range(5):
        task_api.create_task(state, name=f"t{i}")
    page = task_api.search_tasks(state, page=2).value
    assert (page.page_size, page.total_pages, page.current_page) == (2, 3, 2)
    assert len(page.items) == 2


def test_team_stats_and_users(state, alice) -> None:
    stats = task_api.get_team_stats(state).value
    assert stats.total_members == 1
    users = task_api.get_all_users(state).value
    assert [u.id for u in users] == [alice]


@pytest.mark.parametrize(
    ("call", "message"),
    [
        (lambda s: task_api.get_all_tasks(s), "Failed to fetch tasks."),
        (lambda s: task_api.search_tasks(s), "Failed to search tasks."),
        (lambda s: task_api.delete_task(s, 1), "Failed to delete task."),
        (lambda s: task_api.update_task_status(s, 1, "done"), "Failed to update task status."),
        (lambda s: task_api.update_task(s, 1, name="x"), "Failed to update task."),
        (lambda s: task_api.create_task(s, name="x"), "Failed to create task."),
        (lambda s: task_api.get_team_stats(s), "Failed to fetch team statistics."),
    ],
)
def test_storage_failures_become_messages(state, alice, caplog, call, message) -> None:
    broken = replace(state, task_store=BrokenRepo())
    with caplog.at_level(logging.ERROR, logger="taskboard.tasks.task_api"):
        res = call(broken)
    assert not res.ok
    assert res.error == message
    assert broken.task_store.calls
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_list_failure_returns_empty_list(state) -> None:
    broken = replace(state, task_store=BrokenRepo())
    res = task_api.get_all_tasks(broken)
    assert res.value == []


def test_value_errors_from_storage_pass_through(state, alice) -> None:
    broken = replace(state, task_store=BrokenRepo(ValueError("Invalid status: x")))
    res = task_api.update_task_status(broken, 1, "x")
    assert res.error == "Invalid status: x"


@pytest.mark.parametrize(
    ("call", "message"),
    [
        (lambda s: task_api.create_task(s, name="x"), "Failed to create task."),
        (lambda s: task_api.update_task(s, 1, name="x"), "Failed to update task."),
        (lambda s: task_api.get_all_users(s), "Failed to fetch users."),
    ],
)
def test_user_store_failures_become_messages(state, call, message) -> None:
    broken = replace(state, user_store=BrokenRepo(), session_token="token")
    res = call(broken)
    assert not res.ok
    assert res.error == message
    assert state.task_store.count_tasks() == 0
