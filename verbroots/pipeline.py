"""Load pipeline: fetch all sources, parse, build and publish an index."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from verbroots.ingest.base import BaseLoader, FetchSettings, LoadError, SourceSpec
from verbroots.ingest.dictionary import DictionaryLoader
from verbroots.ingest.fetch import fetch_all
from verbroots.ingest.morphology import ClassInfoLoader, MorphologyLoader
from verbroots.ingest.sentences import JoinTableLoader, SentenceLoader
from verbroots.lexicon.builder import IndexBuilder
from verbroots.lexicon.index import VerbRootIndex
from verbroots.lexicon.search import DEFAULT_LIMIT
from verbroots.utils.parallel import map_parallel_ordered


DEFAULT_SOURCES: dict[str, str] = {
    "dictionary": "dictionary.csv",
    "morphology": "reconstructable_verbs.json",
    "sentences": "sentences.csv",
    "join_table": "join_table.csv",
    "classes": "classes_expanded.json",
}

LOADERS: dict[str, type[BaseLoader]] = {
    "dictionary": DictionaryLoader,
    "morphology": MorphologyLoader,
    "sentences": SentenceLoader,
    "join_table": JoinTableLoader,
    "classes": ClassInfoLoader,
}


@dataclass
class LoadResult:
    """Outcome of a load: a complete index, or the error that aborted it."""

    index: VerbRootIndex | None = None
    error: LoadError | None = None

    @property
    def ok(self) -> bool:
        return self.index is not None


def build_source_specs(sources_config: dict[str, Any], data_dir: Path) -> list[SourceSpec]:
    """
    Resolve source locations from sources.yaml content.

    Sources absent from the config fall back to their default file name in
    ``data_dir``; relative paths are taken relative to ``data_dir``.

    Args:
        sources_config: Parsed sources.yaml (``{"sources": {...}}``)
        data_dir: Base directory for relative paths

    Returns:
        One spec per required source
    """
    configured = (sources_config or {}).get("sources") or {}
    specs = []
    for name, default_file in DEFAULT_SOURCES.items():
        entry = configured.get(name) or {}
        if entry.get("url"):
            specs.append(SourceSpec(name=name, url=entry["url"]))
            continue
        path = Path(entry.get("path", default_file))
        specs.append(SourceSpec(name=name, path=path if path.is_absolute() else data_dir / path))
    return specs


def fetch_settings(settings: dict[str, Any]) -> FetchSettings:
    """Build fetch settings from settings.yaml content."""
    fetch = (settings or {}).get("fetch", {})
    parse = (settings or {}).get("parse", {})
    defaults = FetchSettings()
    return FetchSettings(
        timeout=float(fetch.get("timeout", defaults.timeout)),
        max_retries=int(fetch.get("max_retries", defaults.max_retries)),
        backoff_start=float(fetch.get("backoff_start", defaults.backoff_start)),
        backoff_max=float(fetch.get("backoff_max", defaults.backoff_max)),
        max_workers=int(parse.get("max_workers", defaults.max_workers)),
    )


def _parse_one(item: tuple[BaseLoader, bytes]) -> Any:
    loader, raw = item
    try:
        return loader.parse(raw)
    except LoadError:
        raise
    except Exception as e:
        raise LoadError(loader.source_name, f"parse failed: {e}") from e


async def load_index_async(
    specs: list[SourceSpec],
    settings: FetchSettings,
    search_limit: int = DEFAULT_LIMIT,
    logger: logging.Logger | None = None,
) -> LoadResult:
    """
    Fetch every source, parse them and build an index.

    Fetches run concurrently and are awaited together; parsing then runs
    in a thread pool; index construction is synchronous. Any failure
    aborts the whole load.

    Args:
        specs: Source locations (one per required source)
        settings: Fetch and parse settings
        search_limit: Default result cap of the built index
        logger: Logger instance

    Returns:
        Load result with either an index or the error
    """
    logger = logger or logging.getLogger(__name__)

    try:
        names = {spec.name for spec in specs}
        missing = [name for name in LOADERS if name not in names]
        if missing:
            raise LoadError(missing[0], "source not configured")

        payloads = await fetch_all(specs, settings)
        logger.info(f"Fetched {len(payloads)} sources")

        order = list(LOADERS)
        jobs = [(LOADERS[name](logger), payloads[name][0]) for name in order]
        parsed = await asyncio.to_thread(
            lambda: dict(zip(order, map_parallel_ordered(_parse_one, jobs, settings.max_workers)))
        )
    except LoadError as e:
        logger.error(f"Load failed: {e}")
        return LoadResult(error=e)

    index = IndexBuilder(logger, search_limit=search_limit).build(
        records=parsed["dictionary"],
        entries=parsed["morphology"],
        sentences=parsed["sentences"],
        links=parsed["join_table"],
        class_info=parsed["classes"],
        provenance=tuple(payloads[name][1] for name in order),
    )
    return LoadResult(index=index)


def load_index(
    specs: list[SourceSpec],
    settings: FetchSettings | None = None,
    search_limit: int = DEFAULT_LIMIT,
    logger: logging.Logger | None = None,
) -> LoadResult:
    """Synchronous wrapper around ``load_index_async``."""
    return asyncio.run(load_index_async(specs, settings or FetchSettings(), search_limit, logger))


class IndexHolder:
    """
    Publishes the current index snapshot.

    ``reload()`` swaps in a new snapshot only when the load succeeds, so
    readers always see either the previous complete index or the new one.
    """

    def __init__(
        self,
        specs: list[SourceSpec],
        settings: FetchSettings | None = None,
        search_limit: int = DEFAULT_LIMIT,
        logger: logging.Logger | None = None,
    ):
        self.specs = specs
        self.settings = settings or FetchSettings()
        self.search_limit = search_limit
        self.logger = logger or logging.getLogger(__name__)
        self._index: VerbRootIndex | None = None

    @property
    def index(self) -> VerbRootIndex | None:
        return self._index

    def reload(self) -> LoadResult:
        result = load_index(self.specs, self.settings, self.search_limit, self.logger)
        if result.ok:
            self._index = result.index
        elif self._index is not None:
            self.logger.warning("Reload failed, keeping previously published index")
        return result
