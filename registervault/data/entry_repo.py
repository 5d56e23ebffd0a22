from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import List, Sequence, Tuple

from registervault.db.database import get_conn
from registervault.models.category import CategoryRef
from registervault.models.vocab import (
    AlternativeWord,
    Attitude,
    Dialect,
    EntryFields,
    FormalityLevel,
    PartOfSpeech,
    SpecializedRegister,
    VocabularyEntry,
)

_ENTRY_SELECT = """
    SELECT e.id, e.user_id, e.word, e.definition, e.part_of_speech, e.context,
           e.cultural_note, e.formality_level, e.specialized_registers, e.attitude,
           e.dialect, e.category_id, e.created_at, e.updated_at,
           c.name AS category_name, c.color AS category_color
    FROM vocabulary_entries e
    LEFT JOIN categories c ON c.id = e.category_id
"""

def _row_to_entry(r: sqlite3.Row) -> VocabularyEntry:
    category = None
    if r["category_id"] is not None:
        category = CategoryRef(id=r["category_id"], name=r["category_name"], color=r["category_color"])
    return VocabularyEntry(
        id=r["id"],
        user_id=r["user_id"],
        word=r["word"],
        definition=r["definition"],
        part_of_speech=PartOfSpeech(r["part_of_speech"]),
        context=r["context"],
        cultural_note=r["cultural_note"],
        formality_level=FormalityLevel(r["formality_level"]),
        specialized_registers=tuple(SpecializedRegister(t) for t in json.loads(r["specialized_registers"])),
        attitude=Attitude(r["attitude"]),
        dialect=Dialect(r["dialect"]) if r["dialect"] else None,
        category_id=r["category_id"],
        created_at=r["created_at"],
        updated_at=r["updated_at"],
        category=category,
    )

def _scalar_params(fields: EntryFields) -> tuple:
    return (
        fields.word,
        fields.definition,
        fields.part_of_speech.value,
        fields.context,
        fields.cultural_note,
        fields.formality_level.value,
        json.dumps([t.value for t in fields.specialized_registers]),
        fields.attitude.value,
        fields.dialect.value if fields.dialect else None,
    )

def _insert_links(conn: sqlite3.Connection, entry_id: int, user_id: int, category_ids: Sequence[int]) -> None:
    conn.executemany(
        "INSERT INTO vocabulary_categories (vocabulary_entry_id, category_id, user_id) VALUES (?, ?, ?)",
        [(entry_id, cid, user_id) for cid in category_ids],
    )

def _insert_alternatives(conn: sqlite3.Connection, entry_id: int, user_id: int, alternatives: Sequence[AlternativeWord]) -> None:
    conn.executemany(
        """INSERT INTO alternative_words (vocabulary_entry_id, user_id, word, register, definition)
             VALUES (?, ?, ?, ?, ?)""",
        [(entry_id, user_id, a.word, a.register.value, a.definition) for a in alternatives],
    )

class EntryRepo:
    """SQL for vocabulary entries and the rows they own.

    Saves run in a single unit of work: the scalar write and both association
    replacements commit or roll back together.
    """

    def list_entries(self, user_id: int) -> List[VocabularyEntry]:
        with get_conn() as conn:
            rows = conn.execute(
                _ENTRY_SELECT + " WHERE e.user_id = ? ORDER BY e.created_at DESC, e.id DESC",
                (user_id,),
            ).fetchall()
        return [_row_to_entry(r) for r in rows]

    def list_alternatives(self, user_id: int) -> List[Tuple[int, AlternativeWord]]:
        """All alternatives of the user as (vocabulary_entry_id, alternative)."""
        with get_conn() as conn:
            rows = conn.execute(
                """SELECT id, vocabulary_entry_id, word, register, definition
                     FROM alternative_words WHERE user_id = ?
                     ORDER BY id ASC""",
                (user_id,),
            ).fetchall()
        return [
            (r["vocabulary_entry_id"], AlternativeWord(id=r["id"], word=r["word"], definition=r["definition"], register=FormalityLevel(r["register"])))
            for r in rows
        ]

    def list_category_links(self, user_id: int) -> List[Tuple[int, int]]:
        """All (vocabulary_entry_id, category_id) join rows of the user."""
        with get_conn() as conn:
            rows = conn.execute(
                """SELECT vocabulary_entry_id, category_id
                     FROM vocabulary_categories WHERE user_id = ?
                     ORDER BY rowid ASC""",
                (user_id,),
            ).fetchall()
        return [(r["vocabulary_entry_id"], r["category_id"]) for r in rows]

    def create_entry(
        self,
        user_id: int,
        fields: EntryFields,
        category_ids: Sequence[int],
        alternatives: Sequence[AlternativeWord],
    ) -> int:
        now = datetime.now(timezone.utc).isoformat()
        primary = category_ids[0] if category_ids else None
        with get_conn() as conn:
            cur = conn.execute(
                """INSERT INTO vocabulary_entries
                     (word, definition, part_of_speech, context, cultural_note, formality_level,
                      specialized_registers, attitude, dialect, user_id, category_id, created_at, updated_at)
                     VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                _scalar_params(fields) + (user_id, primary, now, now),
            )
            entry_id = int(cur.lastrowid)
            _insert_links(conn, entry_id, user_id, category_ids)
            _insert_alternatives(conn, entry_id, user_id, alternatives)
        return entry_id

    def update_entry(
        self,
        entry_id: int,
        user_id: int,
        fields: EntryFields,
        category_ids: Sequence[int],
        alternatives: Sequence[AlternativeWord],
    ) -> bool:
        """Overwrite scalars and replace both association sets wholesale.

        Returns False (and writes nothing) if the entry is not the user's.
        """
        now = datetime.now(timezone.utc).isoformat()
        primary = category_ids[0] if category_ids else None
        with get_conn() as conn:
            cur = conn.execute(
                """UPDATE vocabulary_entries
                     SET word = ?, definition = ?, part_of_speech = ?, context = ?, cultural_note = ?,
                         formality_level = ?, specialized_registers = ?, attitude = ?, dialect = ?,
                         category_id = ?, updated_at = ?
                     WHERE id = ? AND user_id = ?""",
                _scalar_params(fields) + (primary, now, entry_id, user_id),
            )
            if cur.rowcount == 0:
                return False
            conn.execute("DELETE FROM vocabulary_categories WHERE vocabulary_entry_id = ?", (entry_id,))
            _insert_links(conn, entry_id, user_id, category_ids)
            conn.execute("DELETE FROM alternative_words WHERE vocabulary_entry_id = ?", (entry_id,))
            _insert_alternatives(conn, entry_id, user_id, alternatives)
        return True

    def delete_entry(self, entry_id: int, user_id: int) -> bool:
        with get_conn() as conn:
            cur = conn.execute("DELETE FROM vocabulary_entries WHERE id = ? AND user_id = ?", (entry_id, user_id))
            deleted = cur.rowcount > 0
        return deleted
