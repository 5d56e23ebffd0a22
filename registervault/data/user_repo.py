from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Optional, Tuple

from registervault.db.database import get_conn
from registervault.models.user import User

def _row_to_user(row: sqlite3.Row) -> User:
    return User(id=row["id"], username=row["username"], created_at=row["created_at"])

class UserRepo:
    def create_user(self, username: str, password_hash: str) -> User:
        now = datetime.now(timezone.utc).isoformat()
        with get_conn() as conn:
            cur = conn.execute(
                "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
                (username, password_hash, now),
            )
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?",
                (int(cur.lastrowid),),
            ).fetchone()
        return _row_to_user(row)

    def get_user_by_username_with_hash(self, username: str) -> Optional[Tuple[User, str]]:
        with get_conn() as conn:
            row = conn.execute(
                "SELECT id, username, password_hash, created_at FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if not row:
            return None
        return _row_to_user(row), row["password_hash"]

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with get_conn() as conn:
            row = conn.execute(
                "SELECT id, username, created_at FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return None
        return _row_to_user(row)
