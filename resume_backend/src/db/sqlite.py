"""SQLite database helper and the users repository.

Only used when DATA_PROVIDER=sqlite. Otherwise, the in-memory user store is used.

PySecure-4-Minimal:
- Use parameterized queries.
- Ensure connections are closed via context managers.
- Avoid logging sensitive data.
- Create DB directory if missing; initialize schema on first connect.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Optional

from src.core.config import get_settings


def _ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the users table; email uniqueness is enforced by the database."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            name TEXT NOT NULL,
            middle_name TEXT,
            last_name TEXT,
            second_last_name TEXT,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.commit()


@contextmanager
def get_conn():
    settings = get_settings()
    db_path = Path(settings.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # Requests are served from the threadpool; connections never outlive one call.
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    try:
        _ensure_schema(conn)
        yield conn
    finally:
        conn.close()


def fetch_all(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> list[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    rows = cur.fetchall()
    return [dict(r) for r in rows]


def fetch_one(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> Optional[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    row = cur.fetchone()
    return dict(row) if row else None


def execute(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> None:
    conn.execute(query, list(params))
    conn.commit()


# PUBLIC_INTERFACE
def reset_users_table() -> None:
    """Drop all rows from users for test isolation."""
    with get_conn() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()


# --- Users repository ---

def get_user_by_email(conn: sqlite3.Connection, email_norm: str) -> Optional[dict[str, Any]]:
    """Return user row by normalized email."""
    return fetch_one(conn, "SELECT * FROM users WHERE email = ?", (email_norm,))


def get_user_by_id(conn: sqlite3.Connection, user_id: str) -> Optional[dict[str, Any]]:
    """Return user row by id."""
    return fetch_one(conn, "SELECT * FROM users WHERE id = ?", (user_id,))


def list_users(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    """Return all user rows in insertion order."""
    return fetch_all(conn, "SELECT * FROM users ORDER BY rowid", ())


def insert_user(conn: sqlite3.Connection, rec: dict[str, Any]) -> None:
    """Insert a new user.

    Raises:
        sqlite3.IntegrityError: If the email is already taken.
    """
    execute(
        conn,
        "INSERT INTO users (id, email, password_hash, name, middle_name, last_name, second_last_name, created_at)"
        " VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        (
            rec["id"],
            rec["email"],
            rec["password_hash"],
            rec["name"],
            rec.get("middle_name"),
            rec.get("last_name"),
            rec.get("second_last_name"),
            rec["created_at"],
        ),
    )
