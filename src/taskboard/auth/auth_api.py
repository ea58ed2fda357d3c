# src/taskboard/auth/auth_api.py

from __future__ import annotations

import logging

from ..core.result import ActionResult
from ..core.state import AppState
from .session_cookie import save_session_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def _start_session(state: AppState, user_id: int) -> None:
    state.session_token = state.user_store.create_session(user_id)
    save_session_token(state)


def signup(state: AppState, *, email: str, password: str, name: str) -> ActionResult:
    """Create an account and log it in."""
    if not email:
        return ActionResult.failure("Email is required.")
    if not password:
        return ActionResult.failure("Password is required.")
    if not name or not name.strip():
        return ActionResult.failure("Name is required.")

    try:
        if state.user_store.get_user_by_email(email) is not None:
            return ActionResult.failure("User already exists.")
        user_id = state.user_store.create_user(email=email, password=password, name=name)
        _start_session(state, user_id)
    except Exception:
        logger.exception("signup failed email=%s", email)
        return ActionResult.failure("Failed to sign up.")

    return ActionResult.success(user_id, f"Welcome, {name.strip()}!")


def login(state: AppState, *, email: str, password: str) -> ActionResult:
    if not email:
        return ActionResult.failure("Email is required.")
    if not password:
        return ActionResult.failure("Password is required.")

    try:
        user = state.user_store.verify_password(email, password)
        if user is None:
            logger.info("Failed login attempt email=%s", email)
            return ActionResult.failure(INVALID_CREDENTIALS)
        _start_session(state, user.id)
    except Exception:
        logger.exception("login failed email=%s", email)
        return ActionResult.failure("Failed to log in.")

    logger.info("User %s logged in", user.id)
    return ActionResult.success(user, f"Logged in as {user.name}.")


def logout(state: AppState) -> ActionResult:
    token = state.session_token
    if token:
        try:
            state.user_store.delete_session(token)
        except Exception:
            logger.exception("logout: failed to delete session")
    state.session_token = None
    save_session_token(state)
    return ActionResult.success(None, "Logged out.")


def current_user(state: AppState) -> ActionResult:
    try:
        user = state.current_user()
    except Exception:
        logger.exception("current_user lookup failed")
        return ActionResult.failure("Failed to resolve session.")
    if user is None:
        return ActionResult.failure("Not authenticated.")
    return ActionResult.success(user, f"{user.name} <{user.email}>")


def auto_login(state: AppState) -> ActionResult:
    """
    Demo shortcut: keep a valid session, otherwise log in as the demo user
    (settings.demo_email) without a password.
    """
    try:
        user = state.current_user()
        if user is not None:
            return ActionResult.success(user, f"Already logged in as {user.name}.")

        demo_email = str(getattr(state.settings, "demo_email", "alice@example.com"))
        demo = state.user_store.get_user_by_email(demo_email)
        if demo is None:
            return ActionResult.failure(
                f"Demo user {demo_email} does not exist. Use /seed or /login."
            )
        _start_session(state, demo.id)
    except Exception:
        logger.exception("auto_login failed")
        return ActionResult.failure("Failed to log in.")

    return ActionResult.success(demo, f"Logged in as {demo.name}.")
