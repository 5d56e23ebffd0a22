"""Client-side filtering of the vocabulary list.

Four facets are ANDed together: free-text search, formality, register and
category. Within a facet any selected value may match, and an empty facet
does not filter at all.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, TypeVar

from registervault.models.vocab import FormalityLevel, SpecializedRegister, VocabularyEntry

T = TypeVar("T")


def _toggle(selected: FrozenSet[T], value: T) -> FrozenSet[T]:
    return selected - {value} if value in selected else selected | {value}


@dataclass(frozen=True)
class FilterState:
    search_term: str = ""
    formality: FrozenSet[FormalityLevel] = frozenset()
    registers: FrozenSet[SpecializedRegister] = frozenset()
    categories: FrozenSet[int] = frozenset()

    @property
    def is_active(self) -> bool:
        return bool(self.search_term or self.formality or self.registers or self.categories)

    def with_search(self, term: str) -> "FilterState":
        return replace(self, search_term=term)

    def toggle_formality(self, level: FormalityLevel) -> "FilterState":
        return replace(self, formality=_toggle(self.formality, level))

    def toggle_register(self, register: SpecializedRegister) -> "FilterState":
        return replace(self, registers=_toggle(self.registers, register))

    def toggle_category(self, category_id: int) -> "FilterState":
        return replace(self, categories=_toggle(self.categories, category_id))


def clear_filters() -> FilterState:
    return FilterState()


def matches(entry: VocabularyEntry, state: FilterState) -> bool:
    term = state.search_term.lower()
    matches_search = term in entry.word.lower() or term in entry.definition.lower()

    matches_formality = not state.formality or entry.formality_level in state.formality

    # Intersection, not subset: one shared tag is enough.
    matches_register = not state.registers or not state.registers.isdisjoint(entry.specialized_registers)

    matches_category = not state.categories or entry.category_id in state.categories

    return matches_search and matches_formality and matches_register and matches_category


def filter_entries(entries: Iterable[VocabularyEntry], state: FilterState) -> List[VocabularyEntry]:
    return [e for e in entries if matches(e, state)]
