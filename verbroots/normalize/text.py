"""Text normalization for comparison and search."""

from typing import Any


# Curly single quotes (left, right) fold to a straight apostrophe
QUOTE_FOLDS = str.maketrans({"‘": "'", "’": "'"})


def normalize(text: Any) -> str:
    """
    Canonicalize text for comparison.

    Lower-cases, folds curly single quotes to ``'`` and trims surrounding
    whitespace. Idempotent; ``None`` and empty input give ``""``.

    Args:
        text: Input text (non-strings are converted with ``str``)

    Returns:
        Normalized text
    """
    if text is None:
        return ""
    text = str(text)
    if not text:
        return ""
    return text.lower().translate(QUOTE_FOLDS).strip()


def strip_hyphens(text: str) -> str:
    """Remove every hyphen (root forms are written ``a-dade-g``)."""
    return text.replace("-", "")
