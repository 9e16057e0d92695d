"""Dictionary table loader."""

from verbroots.ingest.base import BaseLoader, cell
from verbroots.models import DictionaryRecord


INDEX_COLUMN = "Index"


class DictionaryLoader(BaseLoader):
    """
    Loader for the flat dictionary CSV.

    Expected columns: Index, Entry, Syllabary, Part_of_Speech, Definition,
    Other_Forms, Source_ID. Only Entry is required; the rest default to "".
    """

    source_name = "dictionary"

    def parse(self, raw: bytes) -> list[DictionaryRecord]:
        df = self.read_table(raw, required=("Entry",))
        index_column = self._index_column(list(df.columns))

        records = []
        for position, row in enumerate(df.to_dict(orient="records")):
            entry_index = row.get(index_column, "") if index_column else ""
            records.append(
                DictionaryRecord(
                    entry_index=entry_index or str(position),
                    headword=cell(row, "Entry"),
                    syllabary=cell(row, "Syllabary"),
                    part_of_speech=cell(row, "Part_of_Speech"),
                    definition=cell(row, "Definition"),
                    other_forms_raw=cell(row, "Other_Forms"),
                    source_id=cell(row, "Source_ID"),
                )
            )

        self.logger.info(f"Loaded {len(records):,} dictionary rows")
        return records

    @staticmethod
    def _index_column(columns: list[str]) -> str | None:
        """The Index column, or an unnamed leading column written by a DataFrame export."""
        if INDEX_COLUMN in columns:
            return INDEX_COLUMN
        if columns and (not columns[0] or columns[0].startswith("Unnamed")):
            return columns[0]
        return None
