"""Integration tests for the end-to-end load pipeline.

These tests validate the complete workflow:
  1. Fetch every source concurrently (files or HTTP)
  2. Parse them
  3. Build and publish the index, or publish nothing on failure
"""

import json
import logging
from pathlib import Path

import pytest
import requests

from verbroots.ingest.base import FetchSettings, SourceSpec
from verbroots.pipeline import (
    DEFAULT_SOURCES,
    IndexHolder,
    build_source_specs,
    fetch_settings,
    load_index,
)


@pytest.fixture
def test_logger() -> logging.Logger:
    """Create a test logger."""
    logger = logging.getLogger("verbroots_test")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def specs(data_dir: Path) -> list[SourceSpec]:
    return build_source_specs({"sources": {}}, data_dir)


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200):
        self.content = content
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class TestSourceSpecs:
    """Test source configuration resolution."""

    def test_defaults(self, temp_dir: Path):
        specs = build_source_specs({}, temp_dir)

        assert [s.name for s in specs] == list(DEFAULT_SOURCES)
        assert specs[0].path == temp_dir / "dictionary.csv"

    def test_configured_paths_and_urls(self, temp_dir: Path):
        config = {
            "sources": {
                "dictionary": {"path": "dict/main.csv"},
                "morphology": {"url": "https://example.org/verbs.json"},
                "classes": {"path": "/abs/classes.json"},
            }
        }
        specs = {s.name: s for s in build_source_specs(config, temp_dir)}

        assert specs["dictionary"].path == temp_dir / "dict" / "main.csv"
        assert specs["morphology"].url == "https://example.org/verbs.json"
        assert specs["morphology"].location == "https://example.org/verbs.json"
        assert specs["classes"].path == Path("/abs/classes.json")

    def test_fetch_settings(self):
        settings = fetch_settings({"fetch": {"timeout": 5, "max_retries": 0}, "parse": {"max_workers": 2}})

        assert settings.timeout == 5.0
        assert settings.max_retries == 0
        assert settings.max_workers == 2
        assert settings.backoff_start == FetchSettings().backoff_start


class TestLoad:
    """Test complete loads from disk."""

    def test_load_from_files(self, specs, test_logger):
        result = load_index(specs, logger=test_logger)

        assert result.ok
        assert result.error is None
        index = result.index
        assert len(index) == 6
        assert index.get_by_entry_no("101").class_name == "A"
        assert [s.word_index for s in index.get_sentences("1")] == ["0", "1"]
        assert index.search("adadeg")[0].headword == "adadega"

    def test_provenance_recorded(self, specs, data_dir):
        result = load_index(specs)

        provenance = {a.source: a for a in result.index.provenance}
        assert set(provenance) == set(DEFAULT_SOURCES)
        dictionary = provenance["dictionary"]
        assert dictionary.hash.startswith("blake2b:")
        assert dictionary.size_bytes == (data_dir / "dictionary.csv").stat().st_size

    def test_search_limit_applied(self, specs):
        result = load_index(specs, search_limit=1)

        assert len(result.index.search("verb")) == 1

    def test_missing_source_fails_whole_load(self, specs, data_dir, test_logger):
        (data_dir / "join_table.csv").unlink()

        result = load_index(specs, logger=test_logger)

        assert not result.ok
        assert result.index is None
        assert result.error.source == "join_table"

    def test_unparseable_source_fails_whole_load(self, specs, data_dir):
        (data_dir / "reconstructable_verbs.json").write_text("{broken", encoding="utf-8")

        result = load_index(specs)

        assert not result.ok
        assert result.error.source == "morphology"

    def test_unconfigured_source_fails(self, specs):
        result = load_index([s for s in specs if s.name != "classes"])

        assert not result.ok
        assert result.error.source == "classes"

    def test_malformed_rows_do_not_fail_load(self, specs, data_dir):
        with (data_dir / "join_table.csv").open("a", encoding="utf-8") as f:
            f.write("1,s999,0\n,,\n")
        morphology = json.loads((data_dir / "reconstructable_verbs.json").read_text(encoding="utf-8"))
        morphology.append(42)
        (data_dir / "reconstructable_verbs.json").write_text(json.dumps(morphology), encoding="utf-8")

        result = load_index(specs)

        assert result.ok
        assert result.index.stats().dangling_links == 2


class TestHttpFetch:
    """Test URL sources with a patched HTTP client."""

    def test_url_source_retried_then_loaded(self, specs, raw_sources, monkeypatch):
        attempts = []

        def fake_get(url, timeout):
            attempts.append(url)
            if len(attempts) < 3:
                raise requests.ConnectionError("connection refused")
            return FakeResponse(raw_sources["morphology"])

        monkeypatch.setattr(requests, "get", fake_get)
        specs = [
            SourceSpec(name="morphology", url="https://example.org/verbs.json") if s.name == "morphology" else s
            for s in specs
        ]
        settings = FetchSettings(max_retries=3, backoff_start=0, backoff_max=0)

        result = load_index(specs, settings)

        assert result.ok
        assert len(attempts) == 3
        assert result.index.get_by_entry_no("102") is not None

    def test_url_source_unavailable(self, specs, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(b"", status=503))
        specs = [
            SourceSpec(name="sentences", url="https://example.org/s.csv") if s.name == "sentences" else s
            for s in specs
        ]
        settings = FetchSettings(max_retries=1, backoff_start=0, backoff_max=0)

        result = load_index(specs, settings)

        assert not result.ok
        assert result.error.source == "sentences"


class TestIndexHolder:
    """Test atomic publication of snapshots."""

    def test_reload_publishes_index(self, specs):
        holder = IndexHolder(specs)
        assert holder.index is None

        result = holder.reload()

        assert result.ok
        assert holder.index is result.index

    def test_failed_reload_keeps_previous_index(self, specs, data_dir):
        holder = IndexHolder(specs)
        holder.reload()
        previous = holder.index

        (data_dir / "sentences.csv").unlink()
        result = holder.reload()

        assert not result.ok
        assert holder.index is previous

    def test_failed_first_load_publishes_nothing(self, specs, data_dir):
        (data_dir / "dictionary.csv").unlink()
        holder = IndexHolder(specs)

        result = holder.reload()

        assert not result.ok
        assert holder.index is None
