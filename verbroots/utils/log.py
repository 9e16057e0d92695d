"""Logging setup for loads and CLI runs.

Records may carry a ``source`` name (dictionary, morphology, ...) and a
dict of context fields. JSON lines keep both as keys; the pretty console
format prints them after the message.
"""

import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


# Chatty third-party loggers kept at WARNING unless running at DEBUG
QUIET_LOGGERS = ("urllib3",)


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        source = getattr(record, "source", None)
        if source:
            log_data["source"] = source
        log_data.update(_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyFormatter(logging.Formatter):
    """Human-readable lines: ``time [LEVEL] logger: [source] message key=value``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        source = getattr(record, "source", None)
        if source:
            head, _, message = line.partition(f"{record.name}: ")
            line = f"{head}{record.name}: [{source}] {message}"
        context = _context(record)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def setup_logging(
    level: str = "INFO",
    format_type: str = "pretty",
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Console output goes to stderr so command output on stdout stays clean.
    The optional log file always receives JSON lines.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Console format ("json" or "pretty")
        log_file: Optional log file path

    Returns:
        Configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if format_type == "json" else PrettyFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        logger.addHandler(file_handler)

    quiet_level = logging.DEBUG if level.upper() == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return logger


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    source: str | None = None,
    **context: Any,
) -> None:
    """
    Log a message tagged with a source name and structured fields.

    Dataclass values (``IndexStats``, ``SourceArtifact``) are flattened into
    their fields.

    Args:
        logger: Logger instance
        level: Log level name
        message: Log message
        source: Source name the message is about, if any
        **context: Additional context fields
    """
    fields: dict[str, Any] = {}
    for key, value in context.items():
        if is_dataclass(value) and not isinstance(value, type):
            fields.update(asdict(value))
        else:
            fields[key] = value

    log_func = getattr(logger, level.lower())
    log_func(message, extra={"source": source, "context": fields})
