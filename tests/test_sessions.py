"""Tests for cookie session storage."""

from datetime import timedelta

from registervault.data.session_repo import SessionRepo
from registervault.db.database import get_conn


def _session_count() -> int:
    with get_conn() as conn:
        return conn.execute("SELECT COUNT(*) AS n FROM sessions").fetchone()["n"]


def test_live_session_resolves_to_user(user_id):
    repo = SessionRepo()
    repo.create_session(user_id, "live-token")
    assert repo.get_user_id_by_token("live-token") == user_id
    assert repo.get_user_id_by_token("unknown-token") is None


def test_expired_session_is_removed(user_id):
    repo = SessionRepo()
    repo.create_session(user_id, "stale-token", lifetime=timedelta(seconds=-1))
    assert repo.get_user_id_by_token("stale-token") is None
    assert _session_count() == 0


def test_logout_deletes_session(user_id):
    repo = SessionRepo()
    repo.create_session(user_id, "token")
    repo.delete_session("token")
    assert repo.get_user_id_by_token("token") is None
