from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from registervault.db.database import get_conn

SESSION_LIFETIME = timedelta(hours=24)

@dataclass(frozen=True)
class SessionRow:
    user_id: int
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at < now

def _row_to_session(r: sqlite3.Row) -> SessionRow:
    return SessionRow(user_id=int(r["user_id"]), expires_at=datetime.fromisoformat(r["expires_at"]))

class SessionRepo:
    """Cookie sessions backing the identity lookup."""

    def create_session(self, user_id: int, token: str, lifetime: timedelta = SESSION_LIFETIME) -> None:
        issued = datetime.now(timezone.utc)
        with get_conn() as conn:
            conn.execute(
                "INSERT INTO sessions (token, user_id, created_at, expires_at) VALUES (?, ?, ?, ?)",
                (token, user_id, issued.isoformat(), (issued + lifetime).isoformat()),
            )

    def get_user_id_by_token(self, token: str) -> Optional[int]:
        """Resolve a session token; an expired session is deleted and resolves to None."""
        with get_conn() as conn:
            row = conn.execute("SELECT user_id, expires_at FROM sessions WHERE token = ?", (token,)).fetchone()
            if not row:
                return None
            session = _row_to_session(row)
            if session.is_expired(datetime.now(timezone.utc)):
                conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
                return None
        return session.user_id

    def delete_session(self, token: str) -> None:
        with get_conn() as conn:
            conn.execute("DELETE FROM sessions WHERE token = ?", (token,))
