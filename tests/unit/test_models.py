"""Tests for root resolution and model helpers."""

from verbroots.models import (
    NULL_ROOT,
    UNCLASSIFIED,
    UNKNOWN_ROOT,
    MorphologicalEntry,
    ResolvedRoot,
    RootKind,
)


def test_empty_root_resolves_to_null_grade():
    """Test that an empty root field is a genuine null grade."""
    root = ResolvedRoot.resolve({"h_grade_root": ""}, "h_grade_root")

    assert root.kind is RootKind.NULL_GRADE
    assert root.label == NULL_ROOT == "null"


def test_absent_root_resolves_to_unknown():
    """Test that an absent root field is unknown, not null."""
    root = ResolvedRoot.resolve({"definition": "x"}, "h_grade_root")

    assert root.kind is RootKind.UNKNOWN
    assert root.label == UNKNOWN_ROOT == "unknown"
    assert root.is_unknown


def test_json_null_root_resolves_to_unknown():
    """Test that JSON null counts as missing data."""
    root = ResolvedRoot.resolve({"h_grade_root": None}, "h_grade_root")

    assert root.is_unknown


def test_attested_root_keeps_its_value():
    """Test that a real root resolves to itself."""
    root = ResolvedRoot.resolve({"h_grade_root": "a-dade-g"}, "h_grade_root")

    assert root.kind is RootKind.ATTESTED
    assert root.label == "a-dade-g"
    assert str(root) == "a-dade-g"


def test_null_and_unknown_are_distinct():
    """Test that the two empty cases never collapse."""
    null = ResolvedRoot.resolve({"r": ""}, "r")
    unknown = ResolvedRoot.resolve({}, "r")

    assert null != unknown
    assert null.label != unknown.label


def test_entry_config_accessors():
    """Test pronoun set type, distributive flag and class fallback."""
    entry = MorphologicalEntry(
        entry_no="1",
        definition="x",
        class_name=None,
        h_grade_root=ResolvedRoot.unknown(),
        glottal_grade_root=ResolvedRoot.unknown(),
        config={"pron": {"set_type": "b"}, "pre": {"distributive": True}},
    )

    assert entry.pronoun_set_type == "b"
    assert entry.is_distributive
    assert entry.class_key == UNCLASSIFIED


def test_entry_config_accessors_tolerate_missing_config():
    """Test accessors on an entry without config."""
    entry = MorphologicalEntry(
        entry_no="1",
        definition="x",
        class_name="A",
        h_grade_root=ResolvedRoot.unknown(),
        glottal_grade_root=ResolvedRoot.unknown(),
        config={"pron": "not a mapping"},
    )

    assert entry.pronoun_set_type is None
    assert not entry.is_distributive
    assert entry.class_key == "A"
