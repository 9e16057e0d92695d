"""Pytest fixtures for verbroots tests."""

import json
import tempfile
from pathlib import Path

import pytest

from verbroots.ingest.dictionary import DictionaryLoader
from verbroots.ingest.morphology import ClassInfoLoader, MorphologyLoader
from verbroots.ingest.sentences import JoinTableLoader, SentenceLoader
from verbroots.lexicon.builder import IndexBuilder, build_search_meta, morph_key
from verbroots.models import DictionaryRecord, DictionaryRow, ResolvedRoot, RootKind
from verbroots.normalize.other_forms import parse_other_forms


DICTIONARY_CSV = """Index,Entry,Syllabary,Part_of_Speech,Definition,Other_Forms,Source_ID
1,adadega,ᎠᏓᏕᎦ,verb (transitive),it’s bouncing,3sg:ᎦᏓᏕᎦ^gadadega^gạdạdéga,101.1
2,agiha,ᎠᎩᎭ,Verb,he's eating it,,102.1
3,ama,ᎠᎹ,noun,water,,
4,unlinked,ᎤᏂ,verb,bare verb,,999.1
5,,Ꭰ,verb,no headword,,101.2
6,adadega2,ᎠᏓᏕᎦ,intransitive verb,it bounced again,,101.2
7,nullroot,ᏅᎷ,verb,null grade,,103
8,nosource,ᏃᏐ,verb,no source id,,
"""

MORPHOLOGY = [
    {
        "entry_no": 101,
        "definition": "it's bouncing",
        "class_name": "A",
        "h_grade_root": "a-dade-g",
        "glottal_grade_root": "a-dade-ʔg",
        "config": {"pron": {"set_type": "a"}, "pre": {"distributive": True}},
        "original_stems": {"present": "adadeg-a", "infinitive": "adadeg-di"},
    },
    {"entry_no": "102", "definition": "eating", "class_name": "B", "h_grade_root": "ga-h"},
    {"entry_no": 103.0, "definition": "null grade", "h_grade_root": "", "glottal_grade_root": ""},
    {
        "entry_no": 104,
        "definition": "another bounce",
        "class_name": "A",
        "h_grade_root": "a-dade-g",
        "glottal_grade_root": "a-dade-ʔg",
    },
    "garbage",
]

SENTENCES_CSV = """ID,Syllabary,Transliteration,Tone,English,Source
s1,ᎦᏓᏕᎦ ᎠᏍᎦᏯ,gadadega asgaya,gạdạdéga asgaya,the man is bouncing,book1
s2,ᎠᎩᎭ,agiha,agiha,he is eating it,book2
"""

JOIN_TABLE_CSV = """Entry_ID,Sentence_ID,Word_Index
1,s1,0
1,s1,0
1,s1,1
2,s2,0
2,s404,0
"""

CLASSES = {
    "A": {
        "present": "-a",
        "imperfective": "-o'i",
        "perfective": "-vʔi",
        "imperative": "-a",
        "infinitive": "-di",
        "note": "consonant stems",
    },
    "B": {"present": "-ha"},
    "C": "not an object",
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def raw_sources() -> dict[str, bytes]:
    """Raw payloads of the five sources, keyed by source name."""
    return {
        "dictionary": DICTIONARY_CSV.encode("utf-8"),
        "morphology": json.dumps(MORPHOLOGY, ensure_ascii=False).encode("utf-8"),
        "sentences": SENTENCES_CSV.encode("utf-8"),
        "join_table": JOIN_TABLE_CSV.encode("utf-8"),
        "classes": json.dumps(CLASSES, ensure_ascii=False).encode("utf-8"),
    }


@pytest.fixture
def data_dir(temp_dir, raw_sources) -> Path:
    """A data directory holding every source under its default file name."""
    names = {
        "dictionary": "dictionary.csv",
        "morphology": "reconstructable_verbs.json",
        "sentences": "sentences.csv",
        "join_table": "join_table.csv",
        "classes": "classes_expanded.json",
    }
    directory = temp_dir / "data"
    directory.mkdir()
    for source, file_name in names.items():
        (directory / file_name).write_bytes(raw_sources[source])
    return directory


@pytest.fixture
def sample_index(raw_sources):
    """Index built directly from the sample payloads."""
    return IndexBuilder().build(
        records=DictionaryLoader().parse(raw_sources["dictionary"]),
        entries=MorphologyLoader().parse(raw_sources["morphology"]),
        sentences=SentenceLoader().parse(raw_sources["sentences"]),
        links=JoinTableLoader().parse(raw_sources["join_table"]),
        class_info=ClassInfoLoader().parse(raw_sources["classes"]),
    )


def resolved(value: str | None) -> ResolvedRoot:
    """None -> unknown, "" -> null grade, otherwise attested."""
    if value is None:
        return ResolvedRoot.unknown()
    if value == "":
        return ResolvedRoot(RootKind.NULL_GRADE)
    return ResolvedRoot(RootKind.ATTESTED, value)


@pytest.fixture
def make_row():
    """Factory for linked DictionaryRow objects."""

    def _make(
        headword: str = "adadega",
        syllabary: str = "ᎠᏓᏕᎦ",
        definition: str = "it’s bouncing",
        other_forms_raw: str = "",
        h_root: str | None = "a-dade-g",
        g_root: str | None = "a-dade-g",
        source_id: str = "101.1",
        entry_index: str = "1",
    ) -> DictionaryRow:
        record = DictionaryRecord(
            entry_index=entry_index,
            headword=headword,
            syllabary=syllabary,
            part_of_speech="verb",
            definition=definition,
            other_forms_raw=other_forms_raw,
            source_id=source_id,
        )
        h, g = resolved(h_root), resolved(g_root)
        return DictionaryRow(
            entry_index=entry_index,
            source_id=source_id,
            headword=headword,
            syllabary=syllabary,
            part_of_speech="verb",
            definition=definition,
            other_forms_raw=other_forms_raw,
            morph_key=morph_key(source_id),
            h_root=h,
            g_root=g,
            search_meta=build_search_meta(record, h, g),
            other_forms=tuple(parse_other_forms(other_forms_raw)),
        )

    return _make
