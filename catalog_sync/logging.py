"""Logging setup for catalog-sync: text or JSON lines on stderr."""

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any, TextIO

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that log per message or per query at INFO
NOISY_LOGGERS = ("confluent_kafka", "psycopg", "faker")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Route all logging to one handler.

    Parameters
    ----------
    level : str
        Log level name; unknown names mean INFO.
    format_type : str
        "standard" for text lines, "json" for one JSON object per line.
    stream : TextIO | None
        Destination. Defaults to stderr, since run reports go to stdout.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("catalog_sync").setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with run context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Set by RunLogAdapter, or by callers passing extra={"extra": {...}}
        context = getattr(record, "extra", None)
        if isinstance(context, dict):
            log_data.update(context)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class RunLogAdapter(logging.LoggerAdapter):
    """Tag every record of one import run with its source.

    Text output gets a ``[source_id]`` prefix; JSON output gets the context
    as top-level keys.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        context = dict(self.extra or {})
        extra = kwargs.setdefault("extra", {})
        context.update(extra.get("extra", {}))
        extra["extra"] = context
        return f"[{context.get('source_id', '-')}] {msg}", kwargs


def run_logger(logger: logging.Logger, source_id: str, **context: Any) -> RunLogAdapter:
    """Logger for one import run of ``source_id``."""
    return RunLogAdapter(logger, {"source_id": source_id, **context})


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually ``__name__``)."""
    return logging.getLogger(name)
