"""Loaders for the nested JSON sources: morphological analyses and verb classes."""

from collections.abc import Mapping
from typing import Any

from verbroots.ingest.base import BaseLoader
from verbroots.models import MorphologicalEntry, ResolvedRoot, VerbClassInfo


ENDING_KEYS = ("present", "imperfective", "perfective", "imperative", "infinitive")


def canonical_entry_no(value: Any) -> str | None:
    """
    Coerce an entry number to its string key.

    ``12``, ``12.0`` and ``" 12 "`` all give ``"12"``; empty gives None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    key = str(value).strip()
    return key or None


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


class MorphologyLoader(BaseLoader):
    """
    Loader for the reconstructed-verb dataset (a JSON list of objects).

    Non-object items are dropped. Root fields keep the distinction between
    an empty string (null grade) and an absent field (unknown).
    """

    source_name = "morphology"

    def parse(self, raw: bytes) -> list[MorphologicalEntry]:
        data = self.read_json(raw)
        if not isinstance(data, list):
            raise self.fail(f"expected a list of objects, got {type(data).__name__}")

        entries = []
        dropped = 0
        for item in data:
            if not isinstance(item, Mapping):
                dropped += 1
                continue

            entries.append(
                MorphologicalEntry(
                    entry_no=canonical_entry_no(item.get("entry_no")),
                    definition=_text(item.get("definition")),
                    class_name=_text(item.get("class_name")) or None,
                    h_grade_root=ResolvedRoot.resolve(item, "h_grade_root"),
                    glottal_grade_root=ResolvedRoot.resolve(item, "glottal_grade_root"),
                    config=_mapping(item.get("config")),
                    original_stems=_mapping(item.get("original_stems")),
                )
            )

        if dropped:
            self.logger.debug(f"Dropped {dropped} non-object morphology items")
        self.logger.info(f"Loaded {len(entries):,} morphological entries")
        return entries


class ClassInfoLoader(BaseLoader):
    """Loader for the class-metadata JSON object (class name -> endings)."""

    source_name = "classes"

    def parse(self, raw: bytes) -> dict[str, VerbClassInfo]:
        data = self.read_json(raw)
        if not isinstance(data, Mapping):
            raise self.fail(f"expected an object keyed by class name, got {type(data).__name__}")

        classes = {}
        for class_name, endings in data.items():
            if not isinstance(endings, Mapping):
                continue
            name = str(class_name).strip()
            classes[name] = VerbClassInfo(
                class_name=name,
                extra={k: v for k, v in endings.items() if k not in ENDING_KEYS},
                **{key: _text(endings.get(key)) for key in ENDING_KEYS},
            )

        self.logger.info(f"Loaded {len(classes):,} verb classes")
        return classes
