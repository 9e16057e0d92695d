"""Base loader interface and shared parsing helpers."""

import io
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from verbroots.utils.log import log_with_context


class LoadError(Exception):
    """A whole source could not be fetched or parsed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


@dataclass
class SourceSpec:
    """Where to fetch one raw source from."""

    name: str
    path: Path | None = None
    url: str | None = None

    @property
    def location(self) -> str:
        return self.url if self.url else str(self.path)


@dataclass
class FetchSettings:
    """Fetch and parse tuning, from settings.yaml."""

    timeout: float = 30.0
    max_retries: int = 2
    backoff_start: float = 0.5
    backoff_max: float = 4.0
    max_workers: int = 4


class BaseLoader(ABC):
    """
    Abstract base class for source loaders.

    Subclasses set ``source_name`` and implement ``parse()``. Whole-source
    failures raise ``LoadError``; malformed rows are dropped or defaulted.
    """

    source_name: str = ""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def parse(self, raw: bytes) -> Any:
        """
        Parse a raw payload into in-memory records.

        Args:
            raw: Source bytes

        Returns:
            Loader-specific records
        """
        pass

    def fail(self, message: str) -> LoadError:
        return LoadError(self.source_name, message)

    def decode(self, raw: bytes) -> str:
        """Decode UTF-8 (BOM tolerated)."""
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise self.fail(f"not valid UTF-8: {e}") from e

    def read_json(self, raw: bytes) -> Any:
        try:
            return json.loads(self.decode(raw))
        except json.JSONDecodeError as e:
            raise self.fail(f"invalid JSON: {e}") from e

    def read_table(self, raw: bytes, required: tuple[str, ...] = ()) -> pd.DataFrame:
        """
        Read a header-first CSV table with every cell as a stripped string.

        Args:
            raw: CSV bytes
            required: Column names that must be present

        Returns:
            DataFrame without fully empty rows
        """
        text = self.decode(raw)
        if not text.strip():
            return pd.DataFrame(columns=list(required))

        try:
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                on_bad_lines="skip",
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
            raise self.fail(f"unreadable table: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        missing = [c for c in required if c not in df.columns]
        if missing:
            raise self.fail(f"missing required columns: {', '.join(missing)}")

        df = df.apply(lambda col: col.str.strip())
        df = df[(df != "").any(axis=1)]

        log_with_context(
            self.logger, "debug", "Read table", source=self.source_name, rows=len(df), columns=list(df.columns)
        )
        return df.reset_index(drop=True)


def cell(row: dict[str, str], *names: str) -> str:
    """First non-missing value among column aliases, else ``""``."""
    for name in names:
        if name in row:
            return row[name]
    return ""
