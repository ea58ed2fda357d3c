# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..auth import auth_api
from ..auth.session_cookie import save_session_token
from ..core.state import AppState
from ..dates import parse_date_string
from ..seed import DEMO_PASSWORD, clear_database, seed_demo_data
from ..tasks import task_api
from ..tasks.task_board import render_board, render_list, render_page_footer
from ..tasks.task_filter import ALL_PRIORITIES, ALL_STATUSES, DueFilter, filter_tasks
from ..tasks.task_models import TaskPriority, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(raw: str) -> int | None:
    raw = raw.strip().lstrip("#").rstrip(".")
    return int(raw) if raw.isdigit() else None


def _show_filtered(state: AppState, page: int | None = None) -> str:
    """Re-run the evaluator with the session's filters and render the page."""
    if page is not None:
        state.list_page = max(1, page)
    res = task_api.search_tasks(state, page=state.list_page)
    if not res.ok:
        return res.text
    result = res.value
    body = render_list(result.items)
    footer = render_page_footer(result.current_page, result.total_pages, result.total_count)
    head = f"Filters: {state.filters.describe()}" if state.filters.has_active_filters() else ""
    return "\n".join(p for p in (head, body, footer) if p)


# ---- general ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.current_user()
    who = f"{user.name} <{user.email}>" if user else "not logged in"
    return (
        "Status:\n"
        f"  User: {who}\n"
        f"  Tasks stored: {state.task_store.count_tasks()}\n"
        f"  Filters: {state.filters.describe()}\n"
        f"  Page size: {state.page_size}"
    )


# ---- auth ----


def cmd_signup(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        return "Usage: /signup <email> <password> <name...>"
    return auth_api.signup(state, email=args[0], password=args[1], name=" ".join(args[2:])).text


def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    return auth_api.login(state, email=args[0], password=args[1]).text


def cmd_logout(state: AppState, args: list[str]) -> str:
    return auth_api.logout(state).text


def cmd_demo(state: AppState, args: list[str]) -> str:
    return auth_api.auto_login(state).text


def cmd_whoami(state: AppState, args: list[str]) -> str:
    return auth_api.current_user(state).text


# ---- task mutations ----


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name> [| description] [| priority] [| status] [| YYYY-MM-DD] [| assignee_id]
    """
    parts = [p.strip() for p in " ".join(args).split("|")]
    if not parts or not parts[0]:
        return "Usage: /add <name> [| description] [| priority] [| status] [| YYYY-MM-DD] [| assignee_id]"
    parts += [""] * (6 - len(parts))
    name, description, priority, status, due_raw, assignee_raw = parts[:6]

    try:
        due = parse_date_string(due_raw) if due_raw else None
    except ValueError as e:
        return str(e)

    assignee_id = None
    if assignee_raw:
        assignee_id = _parse_id(assignee_raw)
        if assignee_id is None:
            return f"Invalid assignee id: {assignee_raw}"

    res = task_api.create_task(
        state,
        name=name,
        description=description or None,
        priority=priority or TaskPriority.MEDIUM,
        status=status or TaskStatus.TODO,
        due_date=due,
        assignee_id=assignee_id,
    )
    if res.ok:
        return f"{res.text} (id={res.value})"
    return res.text


_EDIT_FIELDS = ("name", "description", "priority", "status", "due", "assignee")


def cmd_edit(state: AppState, args: list[str]) -> str:
    usage = "Usage: /edit <id> <field> <value...>; fields: " + ", ".join(_EDIT_FIELDS)
    if len(args) < 2:
        return usage
    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid id."
    fld = args[1].lower()
    value = " ".join(args[2:]).strip()
    clear = value.lower() in ("", "none", "-")

    fields: dict[str, Any]
    if fld == "name":
        fields = {"name": value}
    elif fld == "description":
        fields = {"description": None if clear else value}
    elif fld in ("priority", "status"):
        fields = {fld: value}
    elif fld == "due":
        try:
            fields = {"due_date": None if clear else parse_date_string(value)}
        except ValueError as e:
            return str(e)
    elif fld == "assignee":
        assignee_id = None if clear else _parse_id(value)
        if not clear and assignee_id is None:
            return f"Invalid assignee id: {value}"
        fields = {"assignee_id": assignee_id}
    else:
        return usage

    return task_api.update_task(state, task_id, **fields).text


def cmd_mv(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /mv <id> <status>; statuses: " + ", ".join(s.value for s in TaskStatus)
    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid id."
    return task_api.update_task_status(state, task_id, args[1]).text


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    task_id = _parse_id(args[0])
    if task_id is None:
        return "Invalid id."
    return task_api.delete_task(state, task_id).text


# ---- views ----


def cmd_list(state: AppState, args: list[str]) -> str:
    page = None
    if args:
        if not args[0].isdigit():
            return "Usage: /list [page]"
        page = int(args[0])
    return _show_filtered(state, page)


def cmd_board(state: AppState, args: list[str]) -> str:
    # The board is unpaginated: every task the session filters let through.
    res = task_api.get_all_tasks(state)
    if not res.ok:
        return res.text
    return render_board(filter_tasks(res.value, state.filters))


def cmd_search(state: AppState, args: list[str]) -> str:
    """/search <text...>  (no text clears the search)"""
    state.filters = state.filters.with_search(" ".join(args))
    return _show_filtered(state, page=1)


def _parse_members(values: list[str], enum_cls: type[TaskStatus] | type[TaskPriority]) -> set[Any] | str:
    out: set[Any] = set()
    for raw in values:
        for piece in raw.split(","):
            if not piece:
                continue
            parsed = enum_cls.parse(piece)
            if parsed is None:
                return f"Unknown value: {piece}"
            out.add(parsed)
    return out


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                                 -> show current filters
    /filter status <s...> | all | none      -> replace the status set
    /filter priority <p...> | all | none    -> replace the priority set
    /filter toggle <status-or-priority>     -> flip one checkbox
    /filter assignee all | unassigned | <id>
    /filter due any | overdue | this_week
    /filter reset
    """
    if not args:
        return f"Filters: {state.filters.describe()}"

    sub = args[0].lower()
    rest = args[1:]
    f = state.filters

    if sub == "reset":
        f = f.reset()
    elif sub in ("status", "priority"):
        universe = ALL_STATUSES if sub == "status" else ALL_PRIORITIES
        if not rest:
            return f"Usage: /filter {sub} <values...> | all | none"
        if rest[0].lower() == "all":
            members: set[Any] | str = set(universe)
        elif rest[0].lower() == "none":
            members = set()
        else:
            members = _parse_members(rest, TaskStatus if sub == "status" else TaskPriority)
        if isinstance(members, str):
            return members
        f = f.with_statuses(members) if sub == "status" else f.with_priorities(members)
    elif sub == "toggle":
        if len(rest) != 1:
            return "Usage: /filter toggle <status-or-priority>"
        status = TaskStatus.parse(rest[0])
        priority = TaskPriority.parse(rest[0])
        if status is not None:
            f = f.toggle_status(status)
        elif priority is not None:
            f = f.toggle_priority(priority)
        else:
            return f"Unknown value: {rest[0]}"
    elif sub == "assignee":
        if len(rest) != 1:
            return "Usage: /filter assignee all | unassigned | <id>"
        try:
            f = f.with_assignee(rest[0])
        except ValueError as e:
            return str(e)
    elif sub == "due":
        if len(rest) != 1:
            return "Usage: /filter due any | overdue | this_week"
        try:
            f = f.with_due(rest[0].lower())
        except ValueError:
            return "Usage: /filter due " + " | ".join(d.value for d in DueFilter)
    else:
        return (cmd_filter.__doc__ or "").strip()

    state.filters = f
    return _show_filtered(state, page=1)


# ---- team ----


def cmd_users(state: AppState, args: list[str]) -> str:
    res = task_api.get_all_users(state)
    if not res.ok:
        return res.text
    if not res.value:
        return "No users yet. Use /signup or /seed."
    lines = ["Users:"]
    for u in res.value:
        lines.append(f"  {u.id}. {u.name} <{u.email}>")
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    res = task_api.get_team_stats(state)
    if not res.ok:
        return res.text
    s = res.value
    top = (
        f"{s.top_performer} ({s.top_performer_completed} done)"
        if s.top_performer
        else "-"
    )
    return (
        "Team:\n"
        f"  Members: {s.total_members}\n"
        f"  Open tasks: {s.open_tasks}\n"
        f"  Completed: {s.tasks_completed}\n"
        f"  Top performer: {top}"
    )


def cmd_seed(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Seeding demo data (hashing demo passwords)...")
    try:
        users, tasks = seed_demo_data(state)
    except Exception:
        logger.exception("seed_demo_data failed")
        return "Failed to seed demo data."
    return f"Seeded {users} user(s) and {tasks} task(s). Demo password: {DEMO_PASSWORD}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() != "yes":
        return "This deletes ALL tasks, sessions and users. Confirm with: /clear yes"
    try:
        removed = clear_database(state)
    except Exception:
        logger.exception("clear_database failed")
        return "Failed to clear the database."
    save_session_token(state)
    state.filters = state.filters.reset()
    state.list_page = 1
    return f"Database cleared ({removed} task(s) removed)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session user, filters and totals.")
registry.register("signup", cmd_signup, help_text="Create an account: /signup <email> <password> <name>.")
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Log out and forget the session.")
registry.register("demo", cmd_demo, help_text="Log in as the demo user.")
registry.register("whoami", cmd_whoami, help_text="Show the logged-in user.", aliases=["me"])
registry.register(
    "add",
    cmd_add,
    help_text="Create a task: /add <name> [| description] [| priority] [| status] [| YYYY-MM-DD] [| assignee_id].",
    aliases=["new"],
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <field> <value>.")
registry.register("mv", cmd_mv, help_text="Change status: /mv <id> <status>.", aliases=["move"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["remove", "delete"])
registry.register("list", cmd_list, help_text="List tasks matching the filters: /list [page].", aliases=["ls"])
registry.register("board", cmd_board, help_text="Kanban view of the tasks matching the filters.")
registry.register("search", cmd_search, help_text="Search name/description: /search <text> (empty clears).")
registry.register("filter", cmd_filter, help_text="Status/priority/assignee/due filters: /filter for usage.")
registry.register("users", cmd_users, help_text="List users (assignee ids).")
registry.register("stats", cmd_stats, help_text="Team statistics.")
registry.register("seed", cmd_seed, help_text="Create demo users and tasks.")
registry.register("clear", cmd_clear, help_text="Delete everything: /clear yes.")
