"""Index builder - links dictionary rows, morphology and sentences."""

import logging
from collections import defaultdict
from dataclasses import replace

from verbroots.lexicon.index import IndexStats, VerbRootIndex
from verbroots.lexicon.search import DEFAULT_LIMIT
from verbroots.models import (
    DictionaryRecord,
    DictionaryRow,
    MorphologicalEntry,
    ResolvedRoot,
    SentenceExample,
    SentenceLink,
    SourceArtifact,
    VerbClassInfo,
    create_timestamp,
)
from verbroots.normalize.other_forms import flatten_other_forms, parse_other_forms
from verbroots.normalize.text import normalize, strip_hyphens
from verbroots.utils.log import log_with_context


def is_verb_row(record: DictionaryRecord) -> bool:
    """Rows with a headword whose part of speech mentions "verb"."""
    return bool(record.headword) and "verb" in record.part_of_speech.lower()


def morph_key(source_id: str) -> str:
    """Leading segment of a composite Source_ID (``"123.2"`` -> ``"123"``)."""
    return source_id.split(".", 1)[0].strip()


def build_search_meta(record: DictionaryRecord, h_root: ResolvedRoot, g_root: ResolvedRoot) -> str:
    """
    Build the searchable text of a row.

    Anything not included here cannot be found by substring search.
    """
    h_label = normalize(h_root.label)
    g_label = normalize(g_root.label)
    parts = [
        normalize(record.headword),
        normalize(record.syllabary),
        normalize(record.definition),
        h_label,
        strip_hyphens(h_label),
        g_label,
        strip_hyphens(g_label),
    ]
    parts.extend(normalize(token) for token in flatten_other_forms(record.other_forms_raw))
    return " ".join(parts)


class IndexBuilder:
    """
    Builds a ``VerbRootIndex`` from loader output.

    Pure and single-threaded: inputs are read, never mutated, and a new
    snapshot is returned.
    """

    def __init__(self, logger: logging.Logger | None = None, search_limit: int = DEFAULT_LIMIT):
        self.logger = logger or logging.getLogger(__name__)
        self.search_limit = search_limit

    def build(
        self,
        records: list[DictionaryRecord],
        entries: list[MorphologicalEntry],
        sentences: dict[str, SentenceExample],
        links: list[SentenceLink],
        class_info: dict[str, VerbClassInfo],
        provenance: tuple[SourceArtifact, ...] = (),
    ) -> VerbRootIndex:
        """
        Link the sources and build every lookup index.

        Args:
            records: Dictionary table rows
            entries: Morphological entries in source order
            sentences: Sentences by id
            links: Join-table links in source order
            class_info: Class endings by class name
            provenance: Fetch records of the sources

        Returns:
            Immutable index snapshot
        """
        by_entry_no, by_root, by_class = self._index_entries(entries)
        rows, rows_by_entry_no = self._link_rows(records, by_entry_no)
        sentences_by_entry_id, duplicates, dangling = self._link_sentences(sentences, links)

        linked = sum(1 for row in rows if row.is_linked)
        stats = IndexStats(
            rows=len(rows),
            excluded_rows=len(records) - len(rows),
            entries=len(entries),
            roots=len(by_root),
            classes=len(by_class),
            linked_rows=linked,
            unlinked_rows=len(rows) - linked,
            sentence_links=sum(len(v) for v in sentences_by_entry_id.values()),
            duplicate_links=duplicates,
            dangling_links=dangling,
            built_at=create_timestamp(),
        )
        self.logger.info(
            f"Linked {linked:,} of {len(rows):,} verb rows to {len(entries):,} entries "
            f"({len(records) - len(rows):,} non-verb rows excluded)"
        )
        log_with_context(self.logger, "debug", "Built verb-root index", stats=stats)

        return VerbRootIndex(
            rows=tuple(rows),
            by_entry_no=by_entry_no,
            by_root=by_root,
            by_class=by_class,
            sentences_by_entry_id=sentences_by_entry_id,
            rows_by_entry_no=rows_by_entry_no,
            class_info=dict(class_info),
            provenance=tuple(provenance),
            stats=stats,
            search_limit=self.search_limit,
        )

    def _index_entries(
        self,
        entries: list[MorphologicalEntry],
    ) -> tuple[
        dict[str, MorphologicalEntry],
        dict[str, tuple[MorphologicalEntry, ...]],
        dict[str, tuple[MorphologicalEntry, ...]],
    ]:
        """Index entries by entry number (last wins), root label and class."""
        by_entry_no: dict[str, MorphologicalEntry] = {}
        by_root: dict[str, list[MorphologicalEntry]] = defaultdict(list)
        by_class: dict[str, list[MorphologicalEntry]] = defaultdict(list)

        for entry in entries:
            if entry.entry_no:
                if entry.entry_no in by_entry_no:
                    self.logger.debug(f"Entry number {entry.entry_no} repeated, keeping last")
                by_entry_no[entry.entry_no] = entry
            by_root[entry.h_grade_root.label].append(entry)
            by_class[entry.class_key].append(entry)

        return (
            by_entry_no,
            {root: tuple(group) for root, group in by_root.items()},
            {name: tuple(group) for name, group in by_class.items()},
        )

    def _link_rows(
        self,
        records: list[DictionaryRecord],
        by_entry_no: dict[str, MorphologicalEntry],
    ) -> tuple[list[DictionaryRow], dict[str, DictionaryRow]]:
        """Keep verb rows, resolve their roots and build search text."""
        rows: list[DictionaryRow] = []
        rows_by_entry_no: dict[str, DictionaryRow] = {}

        for record in records:
            if not is_verb_row(record):
                continue

            key = morph_key(record.source_id)
            entry = by_entry_no.get(key) if key else None
            h_root = entry.h_grade_root if entry else ResolvedRoot.unknown()
            g_root = entry.glottal_grade_root if entry else ResolvedRoot.unknown()

            row = DictionaryRow(
                entry_index=record.entry_index,
                source_id=record.source_id,
                headword=record.headword,
                syllabary=record.syllabary,
                part_of_speech=record.part_of_speech,
                definition=record.definition,
                other_forms_raw=record.other_forms_raw,
                morph_key=key,
                h_root=h_root,
                g_root=g_root,
                search_meta=build_search_meta(record, h_root, g_root),
                other_forms=tuple(parse_other_forms(record.other_forms_raw)),
            )
            rows.append(row)
            if entry is not None:
                rows_by_entry_no.setdefault(key, row)

        return rows, rows_by_entry_no

    def _link_sentences(
        self,
        sentences: dict[str, SentenceExample],
        links: list[SentenceLink],
    ) -> tuple[dict[str, tuple[SentenceExample, ...]], int, int]:
        """
        Attach sentences to dictionary entry ids.

        A (sentence, word index) pair is kept once per entry; the same
        sentence with another word index is a separate example.

        Returns:
            Sentences by entry id, duplicate count, dangling-link count
        """
        by_entry_id: dict[str, list[SentenceExample]] = defaultdict(list)
        seen: dict[str, set[tuple[str, str]]] = defaultdict(set)
        duplicates = 0
        dangling = 0

        for link in links:
            sentence = sentences.get(link.sentence_id)
            if sentence is None:
                dangling += 1
                continue

            dedup_key = (link.sentence_id, link.word_index)
            if dedup_key in seen[link.entry_id]:
                duplicates += 1
                continue

            seen[link.entry_id].add(dedup_key)
            by_entry_id[link.entry_id].append(replace(sentence, word_index=link.word_index))

        if dangling:
            self.logger.debug(f"Skipped {dangling} links to unknown sentence ids")

        return {k: tuple(v) for k, v in by_entry_id.items()}, duplicates, dangling
