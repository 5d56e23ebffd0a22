from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

from registervault.config import settings
from registervault.errors import StoreError

logger = structlog.get_logger(__name__)

def _connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn

@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """One unit of work: commit on success, roll back on any error.

    Driver errors leave as StoreError so callers never see sqlite3 types.
    """
    try:
        conn = _connect(settings.DB_PATH)
    except sqlite3.Error as e:
        logger.error("store_connect_failed", db_path=str(settings.DB_PATH), exc_info=True)
        raise StoreError(str(e)) from e
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("store_operation_failed", error=str(e), exc_info=True)
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()

def init_db() -> None:
    settings.DB_PATH.parent.mkdir(parents=True, exist_ok=True)

    with get_conn() as conn:
        # ---- Users ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL
            );
            """
        )

        # ---- Sessions ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS sessions (
                token TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL,
                created_at TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )

        # ---- Categories ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                color TEXT,
                created_at TEXT NOT NULL,
                UNIQUE(user_id, name),
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )

        # ---- Vocabulary entries ----
        # category_id is the primary (display) category; the full set lives in
        # vocabulary_categories.
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS vocabulary_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                word TEXT NOT NULL,
                definition TEXT NOT NULL,
                part_of_speech TEXT NOT NULL,
                context TEXT,
                cultural_note TEXT,
                formality_level TEXT NOT NULL DEFAULT 'N',
                specialized_registers TEXT NOT NULL DEFAULT '[]',
                attitude TEXT NOT NULL DEFAULT 'neutral',
                dialect TEXT,
                category_id INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE,
                FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE SET NULL
            );
            """
        )

        # ---- Entry <-> category join ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS vocabulary_categories (
                vocabulary_entry_id INTEGER NOT NULL,
                category_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                PRIMARY KEY(vocabulary_entry_id, category_id),
                FOREIGN KEY(vocabulary_entry_id) REFERENCES vocabulary_entries(id) ON DELETE CASCADE,
                FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE CASCADE,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )

        # ---- Alternative forms ----
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS alternative_words (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                vocabulary_entry_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                word TEXT NOT NULL,
                register TEXT NOT NULL DEFAULT 'N',
                definition TEXT NOT NULL,
                FOREIGN KEY(vocabulary_entry_id) REFERENCES vocabulary_entries(id) ON DELETE CASCADE,
                FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
            );
            """
        )
