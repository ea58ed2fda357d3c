# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskboard"))

    user = state.current_user()
    greeting = f"logged in as {user.name}" if user else "not logged in (/login, /signup or /demo)"
    _print_ts(f"[{app_name}] {greeting}. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations (e.g., password hashing)
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a search shortcut, like typing into the search box.
        if not user_input.startswith("/"):
            user_input = f"/search {user_input}"

        try:
            cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            print(cmd_response)
            print()

    logger.info("Console connector finished.")
