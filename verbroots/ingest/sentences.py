"""Loaders for the example-sentence table and its join table."""

from verbroots.ingest.base import BaseLoader, cell
from verbroots.models import SentenceExample, SentenceLink


# Field -> accepted column names, first match wins
SENTENCE_COLUMNS: dict[str, tuple[str, ...]] = {
    "syllabary_text": ("Syllabary", "Sentence_Syllabary", "Syllabary_Text"),
    "transliteration": ("Transliteration", "Sentence_Transliteration", "Latin"),
    "tone_marked_text": ("Tone", "Tone_Marked", "Sentence_Tone", "Phonetic"),
    "english_gloss": ("English", "Translation", "Sentence_English", "Gloss"),
}


class SentenceLoader(BaseLoader):
    """Loader for the sentence CSV, keyed by its ID column."""

    source_name = "sentences"

    def parse(self, raw: bytes) -> dict[str, SentenceExample]:
        df = self.read_table(raw, required=("ID",))
        known = {"ID"} | {name for names in SENTENCE_COLUMNS.values() for name in names}

        sentences: dict[str, SentenceExample] = {}
        for row in df.to_dict(orient="records"):
            sentence_id = row["ID"]
            if not sentence_id:
                continue
            sentences[sentence_id] = SentenceExample(
                id=sentence_id,
                extra={k: v for k, v in row.items() if k not in known},
                **{field: cell(row, *names) for field, names in SENTENCE_COLUMNS.items()},
            )

        self.logger.info(f"Loaded {len(sentences):,} sentences")
        return sentences


class JoinTableLoader(BaseLoader):
    """Loader for the Entry_ID / Sentence_ID / Word_Index join table."""

    source_name = "join_table"

    def parse(self, raw: bytes) -> list[SentenceLink]:
        df = self.read_table(raw, required=("Entry_ID", "Sentence_ID"))

        links = []
        for row in df.to_dict(orient="records"):
            entry_id, sentence_id = row["Entry_ID"], row["Sentence_ID"]
            if not entry_id or not sentence_id:
                continue
            links.append(SentenceLink(entry_id, sentence_id, cell(row, "Word_Index")))

        self.logger.info(f"Loaded {len(links):,} sentence links")
        return links
