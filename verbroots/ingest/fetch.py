"""Source fetching: local files or HTTP, fanned out concurrently."""

import asyncio
import logging
from pathlib import Path

import requests

from verbroots.ingest.base import FetchSettings, LoadError, SourceSpec
from verbroots.models import SourceArtifact
from verbroots.utils.hashing import hash_bytes
from verbroots.utils.log import log_with_context
from verbroots.utils.rate import RetryConfig, with_retry


logger = logging.getLogger(__name__)

# Missing local files are not transient; everything else on the wire is
RETRYABLE = (requests.ConnectionError, requests.Timeout, requests.HTTPError)


def _read_path(path: Path) -> bytes:
    return Path(path).read_bytes()


def _get_url(url: str, timeout: float) -> bytes:
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.content


async def _fetch_once(spec: SourceSpec, settings: FetchSettings) -> bytes:
    if spec.url:
        return await asyncio.to_thread(_get_url, spec.url, settings.timeout)
    if spec.path is None:
        raise LoadError(spec.name, "no path or url configured")
    return await asyncio.to_thread(_read_path, spec.path)


async def fetch_source(spec: SourceSpec, settings: FetchSettings) -> tuple[bytes, SourceArtifact]:
    """
    Fetch one source, retrying transient HTTP failures.

    Args:
        spec: Source location
        settings: Timeout and retry settings

    Returns:
        Payload bytes and its provenance record

    Raises:
        LoadError: If the source stays unavailable
    """
    retry_config = RetryConfig(
        max_retries=settings.max_retries if spec.url else 0,
        backoff_start=settings.backoff_start,
        backoff_max=settings.backoff_max,
        retryable_exceptions=RETRYABLE,
    )

    try:
        data = await with_retry(_fetch_once, retry_config, spec, settings)
    except LoadError:
        raise
    except (OSError, requests.RequestException) as e:
        raise LoadError(spec.name, f"unavailable at {spec.location}: {e}") from e

    artifact = SourceArtifact(
        source=spec.name,
        location=spec.location,
        hash=hash_bytes(data),
        size_bytes=len(data),
    )
    log_with_context(logger, "debug", "Fetched source", source=spec.name, artifact=artifact)
    return data, artifact


async def fetch_all(
    specs: list[SourceSpec],
    settings: FetchSettings,
) -> dict[str, tuple[bytes, SourceArtifact]]:
    """
    Fetch every source concurrently and wait for all of them.

    Args:
        specs: Source locations
        settings: Timeout and retry settings

    Returns:
        Mapping of source name to (bytes, provenance)

    Raises:
        LoadError: If any source is unavailable
    """
    results = await asyncio.gather(*(fetch_source(spec, settings) for spec in specs))
    return {spec.name: result for spec, result in zip(specs, results)}
