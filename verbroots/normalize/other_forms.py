"""Parser for the dictionary's compound "Other Forms" field.

Format: ``label:syllabary^transliteration^toneForm`` entries joined by ``|``.
Example: ``3sg.pres:ᎦᏓᏕᎦ^gadadega^gạdạdéga|inf:...``
"""

from verbroots.models import OtherForm


ENTRY_SEPARATOR = "|"
LABEL_SEPARATOR = ":"
PART_SEPARATOR = "^"


def _split_entries(raw: str | None) -> list[tuple[str, list[str]]]:
    """Split into (label, parts) pairs, dropping entries without a label separator."""
    if not raw:
        return []

    entries = []
    for entry in raw.split(ENTRY_SEPARATOR):
        label, sep, body = entry.partition(LABEL_SEPARATOR)
        if not sep:
            continue
        parts = [part.strip() for part in body.split(PART_SEPARATOR)]
        entries.append((label.strip(), parts))
    return entries


def parse_other_forms(raw: str | None) -> list[OtherForm]:
    """
    Decode the Other Forms field into structured records.

    Missing trailing parts become ``""``; entries lacking ``:`` are dropped.

    Args:
        raw: Raw field text

    Returns:
        Alternate forms in field order
    """
    forms = []
    for label, parts in _split_entries(raw):
        parts = (parts + ["", "", ""])[:3]
        forms.append(
            OtherForm(
                label=label,
                syllabary=parts[0],
                transliteration=parts[1],
                tone_form=parts[2],
            )
        )
    return forms


def flatten_other_forms(raw: str | None) -> list[str]:
    """
    Flatten the Other Forms field into its bare form tokens.

    Every non-empty ``^``-separated part is yielded on its own (labels
    excluded), for inclusion in search text.

    Args:
        raw: Raw field text

    Returns:
        Form tokens in field order
    """
    return [part for _, parts in _split_entries(raw) for part in parts if part]
