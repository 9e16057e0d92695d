"""Data models for the verb-root browser."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


NULL_ROOT = "null"
UNKNOWN_ROOT = "unknown"
UNCLASSIFIED = "Unclassified"


class RootKind(str, Enum):
    """How a root label was resolved."""

    ATTESTED = "ATTESTED"
    # Grammatical null grade: the field exists but is empty
    NULL_GRADE = "NULL_GRADE"
    # No data: the field is absent, or the row has no morphological entry
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ResolvedRoot:
    """
    A root label with its resolution kind.

    ``label`` is the value used as index key and for display: the root
    itself, ``"null"`` or ``"unknown"``.
    """

    kind: RootKind
    value: str = ""

    @classmethod
    def resolve(cls, record: Mapping[str, Any], key: str) -> "ResolvedRoot":
        """
        Resolve a root field of a morphological record.

        Args:
            record: Raw morphological object
            key: Field name (``h_grade_root`` or ``glottal_grade_root``)

        Returns:
            Resolved root (null grade for "", unknown for absent/None)
        """
        if key not in record or record[key] is None:
            return cls.unknown()

        value = str(record[key]).strip()
        if not value:
            return cls(RootKind.NULL_GRADE)
        return cls(RootKind.ATTESTED, value)

    @classmethod
    def unknown(cls) -> "ResolvedRoot":
        return cls(RootKind.UNKNOWN)

    @property
    def label(self) -> str:
        if self.kind is RootKind.NULL_GRADE:
            return NULL_ROOT
        if self.kind is RootKind.UNKNOWN:
            return UNKNOWN_ROOT
        return self.value

    @property
    def is_unknown(self) -> bool:
        return self.kind is RootKind.UNKNOWN

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class OtherForm:
    """One alternate conjugated form decoded from the Other_Forms field."""

    label: str
    syllabary: str = ""
    transliteration: str = ""
    tone_form: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "label": self.label,
            "syllabary": self.syllabary,
            "transliteration": self.transliteration,
            "tone_form": self.tone_form,
        }


@dataclass(frozen=True)
class DictionaryRecord:
    """A dictionary table row as loaded, before linking."""

    entry_index: str
    headword: str = ""
    syllabary: str = ""
    part_of_speech: str = ""
    definition: str = ""
    other_forms_raw: str = ""
    source_id: str = ""


@dataclass(frozen=True)
class DictionaryRow:
    """A retained verb row, linked to its morphological entry and searchable."""

    entry_index: str
    source_id: str
    headword: str
    syllabary: str
    part_of_speech: str
    definition: str
    other_forms_raw: str
    morph_key: str
    h_root: ResolvedRoot
    g_root: ResolvedRoot
    search_meta: str
    other_forms: tuple[OtherForm, ...] = ()

    @property
    def is_linked(self) -> bool:
        return not self.h_root.is_unknown

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "entry_index": self.entry_index,
            "source_id": self.source_id,
            "headword": self.headword,
            "syllabary": self.syllabary,
            "part_of_speech": self.part_of_speech,
            "definition": self.definition,
            "other_forms": [form.to_dict() for form in self.other_forms],
            "morph_key": self.morph_key,
            "h_root": self.h_root.label,
            "g_root": self.g_root.label,
        }


@dataclass(frozen=True)
class MorphologicalEntry:
    """One reconstructed verb analysis."""

    entry_no: str | None
    definition: str
    class_name: str | None
    h_grade_root: ResolvedRoot
    glottal_grade_root: ResolvedRoot
    # Schema varies by verb class; kept as open mappings
    config: Mapping[str, Any] = field(default_factory=dict)
    original_stems: Mapping[str, Any] = field(default_factory=dict)

    @property
    def class_key(self) -> str:
        return self.class_name or UNCLASSIFIED

    @property
    def pronoun_set_type(self) -> str | None:
        pron = self.config.get("pron")
        if isinstance(pron, Mapping) and pron.get("set_type"):
            return str(pron["set_type"])
        return None

    @property
    def is_distributive(self) -> bool:
        pre = self.config.get("pre")
        return isinstance(pre, Mapping) and bool(pre.get("distributive"))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "entry_no": self.entry_no,
            "definition": self.definition,
            "class_name": self.class_name,
            "h_grade_root": self.h_grade_root.label,
            "glottal_grade_root": self.glottal_grade_root.label,
            "config": dict(self.config),
            "original_stems": dict(self.original_stems),
        }


@dataclass(frozen=True)
class SentenceExample:
    """A usage sentence; ``word_index`` is set once linked to an entry."""

    id: str
    syllabary_text: str = ""
    transliteration: str = ""
    tone_marked_text: str = ""
    english_gloss: str = ""
    word_index: str = ""
    extra: Mapping[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "syllabary_text": self.syllabary_text,
            "transliteration": self.transliteration,
            "tone_marked_text": self.tone_marked_text,
            "english_gloss": self.english_gloss,
            "word_index": self.word_index,
            "extra": dict(self.extra),
        }


@dataclass(frozen=True)
class SentenceLink:
    """A join-table triple linking a dictionary row to a sentence."""

    entry_id: str
    sentence_id: str
    word_index: str = ""


@dataclass(frozen=True)
class VerbClassInfo:
    """Conjugation endings for a verb class (display decoration only)."""

    class_name: str
    present: str = ""
    imperfective: str = ""
    perfective: str = ""
    imperative: str = ""
    infinitive: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    def endings(self) -> dict[str, str]:
        return {
            "present": self.present,
            "imperfective": self.imperfective,
            "perfective": self.perfective,
            "imperative": self.imperative,
            "infinitive": self.infinitive,
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"class_name": self.class_name, **self.endings(), "extra": dict(self.extra)}


@dataclass(frozen=True)
class SourceArtifact:
    """Provenance of one fetched source payload."""

    source: str
    location: str
    hash: str
    size_bytes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "location": self.location,
            "hash": self.hash,
            "size_bytes": self.size_bytes,
        }


def create_timestamp() -> str:
    """Create ISO 8601 timestamp in UTC."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
