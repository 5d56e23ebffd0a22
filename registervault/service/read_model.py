from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

import structlog

from registervault.data.entry_repo import EntryRepo
from registervault.models.vocab import AlternativeWord, VocabularyEntry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CatalogStats:
    total: int
    this_week: int
    filtered: int


class VocabularyReadModel:
    """Denormalized, per-user cached list of vocabulary entries.

    Entries come back newest first with their primary category attached by the
    store; alternatives and category links are fetched as separate collections
    and merged here. Any mutation must call `invalidate`; the next read then
    reloads the full list. The cache is never patched in place.
    """

    def __init__(self, repo: EntryRepo):
        self.repo = repo
        self._lock = threading.Lock()
        self._cache: Dict[int, List[VocabularyEntry]] = {}
        self._generation: Dict[int, int] = defaultdict(int)

    def list_entries(self, user_id: int) -> List[VocabularyEntry]:
        with self._lock:
            cached = self._cache.get(user_id)
            generation = self._generation[user_id]
        if cached is not None:
            return cached

        entries = self._fetch(user_id)
        with self._lock:
            # An invalidation that raced this fetch wins; keep the result out of the cache.
            if self._generation[user_id] == generation:
                self._cache[user_id] = entries
        return entries

    def get_entry(self, user_id: int, entry_id: int) -> Optional[VocabularyEntry]:
        for entry in self.list_entries(user_id):
            if entry.id == entry_id:
                return entry
        return None

    def invalidate(self, user_id: int) -> None:
        with self._lock:
            self._cache.pop(user_id, None)
            self._generation[user_id] += 1

    def invalidate_all(self) -> None:
        with self._lock:
            for user_id in list(self._generation):
                self._generation[user_id] += 1
            self._cache.clear()

    def _fetch(self, user_id: int) -> List[VocabularyEntry]:
        entries = self.repo.list_entries(user_id)
        alternatives = self.repo.list_alternatives(user_id)
        links = self.repo.list_category_links(user_id)

        alts_by_entry: Dict[int, List[AlternativeWord]] = defaultdict(list)
        for entry_id, alt in alternatives:
            alts_by_entry[entry_id].append(alt)
        cats_by_entry: Dict[int, List[int]] = defaultdict(list)
        for entry_id, category_id in links:
            cats_by_entry[entry_id].append(category_id)

        logger.debug("vocabulary_reloaded", user_id=user_id, entries=len(entries))
        return [
            replace(
                e,
                alternatives=tuple(alts_by_entry.get(e.id, ())),
                category_ids=_primary_first(e.category_id, cats_by_entry.get(e.id, ())),
            )
            for e in entries
        ]


def _primary_first(primary: int | None, category_ids: Sequence[int]) -> tuple[int, ...]:
    if primary is None or primary not in category_ids:
        return tuple(category_ids)
    return (primary,) + tuple(c for c in category_ids if c != primary)


def summarize(
    entries: Sequence[VocabularyEntry],
    filtered: Sequence[VocabularyEntry],
    now: datetime | None = None,
) -> CatalogStats:
    """Counts shown above the list: all entries, last 7 days, after filters."""
    now = now or datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)
    this_week = sum(1 for e in entries if datetime.fromisoformat(e.created_at) >= week_ago)
    return CatalogStats(total=len(entries), this_week=this_week, filtered=len(filtered))
