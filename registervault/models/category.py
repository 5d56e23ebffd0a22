from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    """A user-defined grouping of vocabulary entries."""
    id: int
    user_id: int
    name: str
    description: str | None
    color: str | None
    created_at: str


@dataclass(frozen=True)
class CategoryRef:
    """The slice of a category shown next to an entry."""
    id: int
    name: str
    color: str | None
