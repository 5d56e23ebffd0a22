from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from registervault.db.database import get_conn
from registervault.models.category import Category

_COLUMNS = "id, user_id, name, description, color, created_at"

def _row_to_category(r: sqlite3.Row) -> Category:
    return Category(
        id=r["id"],
        user_id=r["user_id"],
        name=r["name"],
        description=r["description"],
        color=r["color"],
        created_at=r["created_at"],
    )

class CategoryRepo:
    def list_by_user(self, user_id: int) -> List[Category]:
        with get_conn() as conn:
            rows = conn.execute(
                f"""SELECT {_COLUMNS} FROM categories
                     WHERE user_id = ?
                     ORDER BY name COLLATE NOCASE ASC""",
                (user_id,),
            ).fetchall()
        return [_row_to_category(r) for r in rows]

    def get(self, category_id: int, user_id: int) -> Optional[Category]:
        with get_conn() as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            ).fetchone()
        if not row:
            return None
        return _row_to_category(row)

    def create(self, user_id: int, name: str, description: str | None, color: str | None) -> Category:
        now = datetime.now(timezone.utc).isoformat()
        with get_conn() as conn:
            cur = conn.execute(
                """INSERT INTO categories (user_id, name, description, color, created_at)
                     VALUES (?, ?, ?, ?, ?)""",
                (user_id, name, description, color, now),
            )
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE id = ?",
                (int(cur.lastrowid),),
            ).fetchone()
        return _row_to_category(row)

    def update(self, category_id: int, user_id: int, name: str, description: str | None, color: str | None) -> Optional[Category]:
        with get_conn() as conn:
            conn.execute(
                """UPDATE categories SET name = ?, description = ?, color = ?
                     WHERE id = ? AND user_id = ?""",
                (name, description, color, category_id, user_id),
            )
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM categories WHERE id = ? AND user_id = ?",
                (category_id, user_id),
            ).fetchone()
        if not row:
            return None
        return _row_to_category(row)

    def delete(self, category_id: int, user_id: int) -> bool:
        """Delete a category.

        Join rows cascade. Entries whose primary category it was fall back to
        their first remaining link, or NULL when none is left.
        """
        with get_conn() as conn:
            cur = conn.execute("DELETE FROM categories WHERE id = ? AND user_id = ?", (category_id, user_id))
            deleted = cur.rowcount > 0
            if deleted:
                conn.execute(
                    """UPDATE vocabulary_entries
                         SET category_id = (
                             SELECT vc.category_id FROM vocabulary_categories vc
                             WHERE vc.vocabulary_entry_id = vocabulary_entries.id
                             ORDER BY vc.rowid ASC LIMIT 1
                         )
                         WHERE user_id = ? AND category_id IS NULL""",
                    (user_id,),
                )
        return deleted

    def count_owned(self, category_ids: list[int], user_id: int) -> int:
        if not category_ids:
            return 0
        marks = ", ".join("?" for _ in category_ids)
        with get_conn() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS n FROM categories WHERE user_id = ? AND id IN ({marks})",
                (user_id, *category_ids),
            ).fetchone()
        return int(row["n"])
