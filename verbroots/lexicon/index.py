"""Read-only query interface over a built index snapshot."""

from dataclasses import dataclass
from typing import Any

from verbroots.ingest.morphology import canonical_entry_no
from verbroots.lexicon.search import DEFAULT_LIMIT, rank
from verbroots.models import (
    DictionaryRow,
    MorphologicalEntry,
    SentenceExample,
    SourceArtifact,
    VerbClassInfo,
)


@dataclass(frozen=True)
class IndexStats:
    """Counts gathered while building an index."""

    rows: int = 0
    excluded_rows: int = 0
    entries: int = 0
    roots: int = 0
    classes: int = 0
    linked_rows: int = 0
    unlinked_rows: int = 0
    sentence_links: int = 0
    duplicate_links: int = 0
    dangling_links: int = 0
    built_at: str = ""


class VerbRootIndex:
    """
    An immutable snapshot of the linked datasets.

    Built by ``IndexBuilder``; consumers only read from it. List results are
    fresh copies.
    """

    def __init__(
        self,
        rows: tuple[DictionaryRow, ...],
        by_entry_no: dict[str, MorphologicalEntry],
        by_root: dict[str, tuple[MorphologicalEntry, ...]],
        by_class: dict[str, tuple[MorphologicalEntry, ...]],
        sentences_by_entry_id: dict[str, tuple[SentenceExample, ...]],
        rows_by_entry_no: dict[str, DictionaryRow],
        class_info: dict[str, VerbClassInfo],
        provenance: tuple[SourceArtifact, ...] = (),
        stats: IndexStats | None = None,
        search_limit: int = DEFAULT_LIMIT,
    ):
        self._rows = rows
        self._by_entry_no = by_entry_no
        self._by_root = by_root
        self._by_class = by_class
        self._sentences = sentences_by_entry_id
        self._rows_by_entry_no = rows_by_entry_no
        self._class_info = class_info
        self.provenance = provenance
        self._stats = stats or IndexStats()
        self.search_limit = search_limit

    @property
    def rows(self) -> tuple[DictionaryRow, ...]:
        return self._rows

    def get_by_entry_no(self, key: Any) -> MorphologicalEntry | None:
        entry_no = canonical_entry_no(key)
        return self._by_entry_no.get(entry_no) if entry_no else None

    def get_by_root(self, root: str) -> list[MorphologicalEntry]:
        return list(self._by_root.get(root, ()))

    def get_by_class(self, class_name: str) -> list[MorphologicalEntry]:
        return list(self._by_class.get(class_name, ()))

    def get_sentences(self, entry_id: Any) -> list[SentenceExample]:
        return list(self._sentences.get(str(entry_id).strip(), ()))

    def get_class_info(self, class_name: str | None) -> VerbClassInfo | None:
        return self._class_info.get(class_name) if class_name else None

    def find_row_by_entry_no(self, entry_no: Any) -> DictionaryRow | None:
        """Reverse lookup: the first dictionary row linked to a morphological entry."""
        key = canonical_entry_no(entry_no)
        return self._rows_by_entry_no.get(key) if key else None

    def search(
        self,
        query: str,
        limit: int | None = None,
        linked_only: bool = False,
    ) -> list[DictionaryRow]:
        """
        Rank dictionary rows for a free-text query.

        Rows without a linked root are dropped before ranking when
        ``linked_only`` is set, so the cap counts linked rows only.

        Args:
            query: Raw query text
            limit: Result cap (default: the index's search limit)
            linked_only: Skip rows whose h-grade root is unknown

        Returns:
            At most ``limit`` rows, best first
        """
        rows = [row for row in self._rows if row.is_linked] if linked_only else self._rows
        return rank(rows, query, self.search_limit if limit is None else limit)

    def roots(self) -> list[str]:
        """Root labels in first-seen order."""
        return list(self._by_root)

    def class_names(self) -> list[str]:
        return list(self._by_class)

    def stats(self) -> IndexStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._rows)
