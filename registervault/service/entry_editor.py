from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from registervault.config import settings
from registervault.data.entry_repo import EntryRepo
from registervault.errors import AuthenticationError, NotFoundError, ValidationError
from registervault.models.category import Category
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
from registervault.service.category_service import CategoryService
from registervault.service.read_model import VocabularyReadModel

logger = structlog.get_logger(__name__)


@dataclass
class EditorState:
    word: str = ""
    definition: str = ""
    part_of_speech: PartOfSpeech = PartOfSpeech.NOUN
    context: str = ""
    cultural_note: str = ""
    formality_level: FormalityLevel = FormalityLevel.NEUTRAL
    specialized_registers: List[SpecializedRegister] = field(default_factory=list)
    attitude: Attitude = Attitude.NEUTRAL
    dialect: Optional[Dialect] = None
    category_ids: List[int] = field(default_factory=list)
    alternatives: List[AlternativeWord] = field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: VocabularyEntry) -> "EditorState":
        return cls(
            word=entry.word,
            definition=entry.definition,
            part_of_speech=entry.part_of_speech,
            context=entry.context or "",
            cultural_note=entry.cultural_note or "",
            formality_level=entry.formality_level,
            specialized_registers=list(entry.specialized_registers),
            attitude=entry.attitude,
            dialect=entry.dialect,
            category_ids=list(entry.category_ids),
            alternatives=list(entry.alternatives),
        )

    def to_fields(self) -> EntryFields:
        return EntryFields(
            word=self.word.strip(),
            definition=self.definition.strip(),
            part_of_speech=self.part_of_speech,
            context=self.context.strip() or None,
            cultural_note=self.cultural_note.strip() or None,
            formality_level=self.formality_level,
            specialized_registers=tuple(self.specialized_registers),
            attitude=self.attitude,
            dialect=self.dialect,
        )


@dataclass
class QuickCreateState:
    name: str = ""
    description: str = ""
    color: str = settings.DEFAULT_CATEGORY_COLOR
    is_open: bool = False


class EntryEditor:
    """Create/update workflow for one vocabulary entry.

    Holds the editable state (scalars, register tags, selected categories,
    alternatives) plus the inline category quick-create panel. `submit`
    validates and persists; nothing is written before it.
    """

    def __init__(
        self,
        repo: EntryRepo,
        categories: CategoryService,
        read_model: VocabularyReadModel,
        user_id: Optional[int],
    ):
        self.repo = repo
        self.categories = categories
        self.read_model = read_model
        self.user_id = user_id
        self.entry: Optional[VocabularyEntry] = None
        self.state = EditorState()
        self.quick_create = QuickCreateState()
        self.is_open = False

    @property
    def is_edit_mode(self) -> bool:
        return self.entry is not None

    def open(self, existing: Optional[VocabularyEntry] = None) -> None:
        if existing is not None and existing.user_id != self.user_id:
            raise NotFoundError(f"Entry {existing.id} not found")
        self.entry = existing
        self.state = EditorState.from_entry(existing) if existing else EditorState()
        self.quick_create = QuickCreateState()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    # ---------- field collections ----------

    def toggle_register(self, tag: SpecializedRegister) -> None:
        if tag in self.state.specialized_registers:
            self.state.specialized_registers.remove(tag)
        else:
            self.state.specialized_registers.append(tag)

    def add_category(self, category_id: int) -> None:
        if category_id not in self.state.category_ids:
            self.state.category_ids.append(category_id)

    def remove_category(self, category_id: int) -> None:
        if category_id in self.state.category_ids:
            self.state.category_ids.remove(category_id)

    def add_alternative(self, word: str, definition: str, register: FormalityLevel = FormalityLevel.NEUTRAL) -> bool:
        """Append an alternative form. Blank word or definition is ignored."""
        word, definition = word.strip(), definition.strip()
        if not word or not definition:
            return False
        self.state.alternatives.append(AlternativeWord(word=word, definition=definition, register=register))
        return True

    def remove_alternative(self, index: int) -> None:
        if 0 <= index < len(self.state.alternatives):
            del self.state.alternatives[index]

    # ---------- category quick-create ----------

    def open_quick_create(self) -> None:
        self.quick_create.is_open = True

    def submit_quick_create(self) -> Category:
        category = self.categories.create_category(
            self.user_id,
            self.quick_create.name,
            self.quick_create.description,
            self.quick_create.color,
        )
        self.add_category(category.id)
        self.quick_create = QuickCreateState()
        return category

    # ---------- persistence ----------

    def submit(self) -> int:
        """Validate and save. Returns the entry id."""
        fields = self.state.to_fields()
        if not fields.word or not fields.definition:
            raise ValidationError("missing fields")
        if not self.state.category_ids:
            raise ValidationError("category required")
        if self.user_id is None:
            raise AuthenticationError()

        category_ids = list(self.state.category_ids)
        self.categories.ensure_owned(self.user_id, category_ids)
        alternatives = list(self.state.alternatives)

        if self.entry is not None:
            entry_id = self.entry.id
            if not self.repo.update_entry(entry_id, self.user_id, fields, category_ids, alternatives):
                raise NotFoundError(f"Entry {entry_id} not found")
            logger.info("entry_updated", user_id=self.user_id, entry_id=entry_id, categories=len(category_ids), alternatives=len(alternatives))
        else:
            entry_id = self.repo.create_entry(self.user_id, fields, category_ids, alternatives)
            logger.info("entry_created", user_id=self.user_id, entry_id=entry_id, categories=len(category_ids), alternatives=len(alternatives))
            self.state = EditorState()

        self.read_model.invalidate(self.user_id)
        self.close()
        return entry_id

    def delete_entry(self, entry_id: int) -> None:
        if self.user_id is None:
            raise AuthenticationError()
        if not self.repo.delete_entry(entry_id, self.user_id):
            raise NotFoundError(f"Entry {entry_id} not found")
        self.read_model.invalidate(self.user_id)
        logger.info("entry_deleted", user_id=self.user_id, entry_id=entry_id)
        if self.entry is not None and self.entry.id == entry_id:
            self.entry = None
            self.close()
