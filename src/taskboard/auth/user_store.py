# src/taskboard/auth/user_store.py

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import sqlite3
import time
from pathlib import Path

from ..storage import SQLiteDatabase
from ..tasks.task_models import User

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 200_000
_HASH_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, *, salt: str | None = None, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Return "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{_HASH_SCHEME}${iterations}${salt}${digest.hex()}"


def check_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, _ = stored.split("$", 3)
    except ValueError:
        return False
    if scheme != _HASH_SCHEME:
        return False
    candidate = hash_password(password, salt=salt, iterations=int(iterations))
    return hmac.compare_digest(candidate, stored)


class UserStore:
    """
    Users and login sessions (opaque random tokens).

    Sessions never expire on their own; logout deletes them.
    """

    def __init__(
        self,
        db: SQLiteDatabase | str | Path = "taskboard.sqlite3",
        *,
        password_iterations: int = _PBKDF2_ITERATIONS,
    ) -> None:
        self._db = db if isinstance(db, SQLiteDatabase) else SQLiteDatabase(db)
        self._iterations = max(1, int(password_iterations))

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            email=str(row["email"]),
            name=str(row["name"]),
            created_at=float(row["created_at"] or 0.0),
        )

    # ---- users ----

    def count_users(self) -> int:
        conn = self._db.connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
            return int(n)
        finally:
            conn.close()

    def create_user(self, *, email: str, password: str, name: str) -> int:
        email = (email or "").strip().lower()
        if not email:
            raise ValueError("Email is required.")
        if not password:
            raise ValueError("Password is required.")
        if not name or not name.strip():
            raise ValueError("Name is required.")

        conn = self._db.connect()
        try:
            cur = conn.execute(
                "INSERT INTO users(email, name, password_hash, created_at) VALUES (?, ?, ?, ?)",
                (email, name.strip(), hash_password(password, iterations=self._iterations), time.time()),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for users insert")
            logger.info("User created id=%s email=%s", rowid, email)
            return int(rowid)
        finally:
            conn.close()

    def get_user(self, user_id: int) -> User | None:
        conn = self._db.connect()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (int(user_id),)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def get_user_by_email(self, email: str) -> User | None:
        conn = self._db.connect()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", ((email or "").strip().lower(),)
            ).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def list_users(self) -> list[User]:
        conn = self._db.connect()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY name ASC, id ASC").fetchall()
            return [self._row_to_user(r) for r in rows]
        finally:
            conn.close()

    def verify_password(self, email: str, password: str) -> User | None:
        conn = self._db.connect()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", ((email or "").strip().lower(),)
            ).fetchone()
        finally:
            conn.close()
        if row is None or not check_password(password or "", str(row["password_hash"])):
            return None
        return self._row_to_user(row)

    # ---- sessions ----

    def create_session(self, user_id: int) -> str:
        token = secrets.token_hex(32)
        conn = self._db.connect()
        try:
            conn.execute(
                "INSERT INTO sessions(token, user_id, created_at) VALUES (?, ?, ?)",
                (token, int(user_id), time.time()),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Session created user_id=%s", user_id)
        return token

    def get_user_by_session(self, token: str | None) -> User | None:
        if not token:
            return None
        conn = self._db.connect()
        try:
            row = conn.execute(
                """
                SELECT u.*
                FROM sessions s
                JOIN users u ON u.id = s.user_id
                WHERE s.token = ?
                """,
                (token,),
            ).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def delete_session(self, token: str) -> None:
        conn = self._db.connect()
        try:
            conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
            conn.commit()
        finally:
            conn.close()

    def clear(self) -> None:
        """Delete sessions, then users (tasks should be cleared first)."""
        conn = self._db.connect()
        try:
            conn.execute("DELETE FROM sessions")
            conn.execute("DELETE FROM users")
            conn.commit()
        finally:
            conn.close()
