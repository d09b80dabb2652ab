"""User persistence service.

Async facade over the configured provider: SQLite when DATA_PROVIDER=sqlite,
otherwise a process-local in-memory store. Blocking sqlite calls run in the
threadpool so the event loop is never held by disk I/O.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from starlette.concurrency import run_in_threadpool

from src.core.config import get_settings
from src.db import sqlite as sqlite_db
from src.models.user import StoredUser, TokenModel, UserRegister

logger = logging.getLogger(__name__)


class SaveResult(IntEnum):
    """Outcome of ``UserService.save``, valued like the HTTP status it stands for."""
    CREATED = 201
    CONFLICT = 409


# In-memory fallback stores (DATA_PROVIDER=memory)
_mem_users: Dict[str, Dict[str, Any]] = {}  # id -> record
_mem_users_by_email: Dict[str, str] = {}  # email -> id


# PUBLIC_INTERFACE
def reset_user_store() -> None:
    """Clear every stored user for the active provider (tests and local dev)."""
    _mem_users.clear()
    _mem_users_by_email.clear()
    if get_settings().data_provider == "sqlite":
        sqlite_db.reset_users_table()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _to_stored(rec: Dict[str, Any]) -> StoredUser:
    return StoredUser(
        id=rec["id"],
        email=rec["email"],
        password=rec["password_hash"],
        name=rec["name"],
        middle_name=rec.get("middle_name"),
        last_name=rec.get("last_name"),
        second_last_name=rec.get("second_last_name"),
        created_at=rec.get("created_at"),
    )


class UserService:
    """Reads and writes user accounts."""

    def __init__(self) -> None:
        self.provider = get_settings().data_provider

    async def get_user_by_email(self, email: str) -> Optional[StoredUser]:
        """Fetch a user by email (case-insensitive); None when absent."""
        email_norm = normalize_email(email)
        if self.provider == "sqlite":
            rec = await run_in_threadpool(self._sqlite_by_email, email_norm)
        else:
            uid = _mem_users_by_email.get(email_norm)
            rec = _mem_users.get(uid) if uid else None
        return _to_stored(rec) if rec else None

    async def get_user_by_id(self, user_id: str) -> Optional[StoredUser]:
        """Fetch a user by primary key; None when absent."""
        if self.provider == "sqlite":
            rec = await run_in_threadpool(self._sqlite_by_id, user_id)
        else:
            rec = _mem_users.get(user_id)
        return _to_stored(rec) if rec else None

    async def save(self, user: UserRegister) -> SaveResult:
        """Insert a user whose ``password`` already holds the hash.

        Returns CONFLICT when the email is taken at insert time.
        """
        rec = {
            "id": str(uuid4()),
            "email": normalize_email(str(user.email)),
            "password_hash": user.password,
            "name": user.name,
            "middle_name": user.middle_name,
            "last_name": user.last_name,
            "second_last_name": user.second_last_name,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        if self.provider == "sqlite":
            return await run_in_threadpool(self._sqlite_insert, rec)
        if rec["email"] in _mem_users_by_email:
            return SaveResult.CONFLICT
        _mem_users[rec["id"]] = rec
        _mem_users_by_email[rec["email"]] = rec["id"]
        return SaveResult.CREATED

    async def get_all_users(self) -> List[TokenModel]:
        """List every user as its public projection (no password hash)."""
        if self.provider == "sqlite":
            rows = await run_in_threadpool(self._sqlite_all)
        else:
            rows = list(_mem_users.values())
        return [_to_stored(r).to_token_model() for r in rows]

    @staticmethod
    def _sqlite_by_email(email_norm: str) -> Optional[Dict[str, Any]]:
        with sqlite_db.get_conn() as conn:
            return sqlite_db.get_user_by_email(conn, email_norm)

    @staticmethod
    def _sqlite_by_id(user_id: str) -> Optional[Dict[str, Any]]:
        with sqlite_db.get_conn() as conn:
            return sqlite_db.get_user_by_id(conn, user_id)

    @staticmethod
    def _sqlite_all() -> List[Dict[str, Any]]:
        with sqlite_db.get_conn() as conn:
            return sqlite_db.list_users(conn)

    @staticmethod
    def _sqlite_insert(rec: Dict[str, Any]) -> SaveResult:
        try:
            with sqlite_db.get_conn() as conn:
                sqlite_db.insert_user(conn, rec)
        except sqlite3.IntegrityError:
            logger.warning("unique constraint hit while saving user %s", rec["id"])
            return SaveResult.CONFLICT
        return SaveResult.CREATED
