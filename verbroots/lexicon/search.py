"""Relevance scoring and ranking over dictionary rows."""

from collections.abc import Iterable

from verbroots.models import DictionaryRow
from verbroots.normalize.text import normalize, strip_hyphens


ROOT_EXACT_SCORE = 100
HEADWORD_EXACT_SCORE = 50
SUBSTRING_SCORE = 1

DEFAULT_LIMIT = 50


def score(row: DictionaryRow, query: str) -> int:
    """
    Score a row against a free-text query.

    Tiers are additive: +100 when the hyphen-insensitive query equals the
    row's h-grade or glottal-grade root, +50 when it equals the headword or
    syllabary, +1 when it occurs in the row's search text. 0 means no match.

    Args:
        row: Candidate row
        query: Raw query text

    Returns:
        Non-negative score
    """
    normalized = normalize(query)
    if not normalized:
        return 0
    bare = strip_hyphens(normalized)

    total = 0
    if bare and bare in (
        strip_hyphens(normalize(row.h_root.label)),
        strip_hyphens(normalize(row.g_root.label)),
    ):
        total += ROOT_EXACT_SCORE
    if normalized in (normalize(row.headword), normalize(row.syllabary)):
        total += HEADWORD_EXACT_SCORE
    if normalized in row.search_meta:
        total += SUBSTRING_SCORE
    return total


def rank(
    rows: Iterable[DictionaryRow],
    query: str,
    limit: int = DEFAULT_LIMIT,
) -> list[DictionaryRow]:
    """
    Rank rows for a query.

    Zero scores are discarded; the rest sort by score descending, then
    headword ascending, and are capped at ``limit`` after sorting.

    Args:
        rows: Candidate rows
        query: Raw query text
        limit: Maximum number of results

    Returns:
        Ranked rows
    """
    scored = [(score(row, query), row) for row in rows]
    matches = sorted(
        ((s, row) for s, row in scored if s > 0),
        key=lambda pair: (-pair[0], pair[1].headword),
    )
    return [row for _, row in matches[:limit]]
