from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Type, TypeVar

from registervault.models.category import CategoryRef

E = TypeVar("E", bound=Enum)


def _exhaustive(enum_cls: Type[E], table: Mapping[E, str]) -> Mapping[E, str]:
    """Fail at import time if a lookup table misses an enum member."""
    missing = [m.value for m in enum_cls if m not in table]
    if missing:
        raise TypeError(f"{enum_cls.__name__} lookup is missing {missing}")
    return table


class PartOfSpeech(str, Enum):
    NOUN = "Noun"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADVERB = "Adverb"
    PRONOUN = "Pronoun"
    PREPOSITION = "Preposition"
    CONJUNCTION = "Conjunction"
    INTERJECTION = "Interjection"
    PHRASE_IDIOM = "Phrase/Idiom"

    @property
    def label(self) -> str:
        return self.value


class FormalityLevel(str, Enum):
    """7-point informal <-> formal scale, declared in scale order."""
    VERY_INFORMAL = "very I"
    INFORMAL = "I"
    MORE_INFORMAL = "more I"
    NEUTRAL = "N"
    MORE_FORMAL = "more F"
    FORMAL = "F"
    VERY_FORMAL = "very F"

    @property
    def rank(self) -> int:
        return list(FormalityLevel).index(self)

    @property
    def label(self) -> str:
        return _FORMALITY_LABELS[self]

    @property
    def tone(self) -> str:
        """Badge family: informal, neutral or formal."""
        if self is FormalityLevel.NEUTRAL:
            return "neutral"
        return "informal" if self.rank < FormalityLevel.NEUTRAL.rank else "formal"


class SpecializedRegister(str, Enum):
    ACADEMIC = "A"
    LITERARY = "L"
    LEGAL = "LEG"
    BUSINESS = "BUS"
    JOURNALISM = "JNL"
    SPOKEN = "S"
    WRITTEN = "W"

    @property
    def label(self) -> str:
        return _REGISTER_LABELS[self]


class Attitude(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    OLD_FASHIONED = "O"
    HUMOROUS = "H"

    @property
    def label(self) -> str:
        return _ATTITUDE_LABELS[self]


class Dialect(str, Enum):
    BRITISH = "BR"
    AMERICAN = "AM"
    AUSTRALIAN = "AUS"
    CANADIAN = "CA"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return _DIALECT_LABELS[self]


_FORMALITY_LABELS = _exhaustive(FormalityLevel, {
    FormalityLevel.VERY_INFORMAL: "very informal",
    FormalityLevel.INFORMAL: "informal",
    FormalityLevel.MORE_INFORMAL: "more informal",
    FormalityLevel.NEUTRAL: "neutral",
    FormalityLevel.MORE_FORMAL: "more formal",
    FormalityLevel.FORMAL: "formal",
    FormalityLevel.VERY_FORMAL: "very formal",
})

_REGISTER_LABELS = _exhaustive(SpecializedRegister, {
    SpecializedRegister.ACADEMIC: "academic",
    SpecializedRegister.LITERARY: "literary",
    SpecializedRegister.LEGAL: "legal",
    SpecializedRegister.BUSINESS: "business",
    SpecializedRegister.JOURNALISM: "journalism",
    SpecializedRegister.SPOKEN: "spoken",
    SpecializedRegister.WRITTEN: "written",
})

_ATTITUDE_LABELS = _exhaustive(Attitude, {
    Attitude.POSITIVE: "positive",
    Attitude.NEGATIVE: "negative",
    Attitude.NEUTRAL: "neutral",
    Attitude.OLD_FASHIONED: "old-fashioned",
    Attitude.HUMOROUS: "humorous",
})

_DIALECT_LABELS = _exhaustive(Dialect, {
    Dialect.BRITISH: "British",
    Dialect.AMERICAN: "American",
    Dialect.AUSTRALIAN: "Australian",
    Dialect.CANADIAN: "Canadian",
    Dialect.OTHER: "Other",
})


@dataclass(frozen=True)
class AlternativeWord:
    """A synonym or paraphrase owned by one vocabulary entry."""
    word: str
    definition: str
    register: FormalityLevel = FormalityLevel.NEUTRAL
    id: int | None = None


@dataclass(frozen=True)
class EntryFields:
    """Scalar columns written on every entry save."""
    word: str
    definition: str
    part_of_speech: PartOfSpeech
    context: str | None
    cultural_note: str | None
    formality_level: FormalityLevel
    specialized_registers: tuple[SpecializedRegister, ...]
    attitude: Attitude
    dialect: Dialect | None


@dataclass(frozen=True)
class VocabularyEntry:
    """A vocabulary entry as displayed.

    `category` is the primary category only; `category_ids` is the full
    association set.
    """
    id: int
    user_id: int
    word: str
    definition: str
    part_of_speech: PartOfSpeech
    context: str | None
    cultural_note: str | None
    formality_level: FormalityLevel
    specialized_registers: tuple[SpecializedRegister, ...]
    attitude: Attitude
    dialect: Dialect | None
    category_id: int | None
    created_at: str
    updated_at: str
    category: CategoryRef | None = None
    category_ids: tuple[int, ...] = ()
    alternatives: tuple[AlternativeWord, ...] = ()
