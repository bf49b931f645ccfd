"""Structured JSON logging with trace correlation."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import Any

import orjson

from tfidf_engine.observability.context import get_trace_context


class JsonFormatter(logging.Formatter):
    """One orjson-encoded object per record, carrying index context fields.

    Only the fields in ``CONTEXT_FIELDS`` are copied from ``extra=``; document
    ids are rendered with ``str`` so caller-supplied id types stay readable.
    """

    CONTEXT_FIELDS = ("doc_id", "term", "terms", "distinct_terms", "candidates", "results", "documents", "path")
    MAX_MESSAGE_LEN = 2000

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        message = record.getMessage()
        if len(message) > self.MAX_MESSAGE_LEN:
            message = message[: self.MAX_MESSAGE_LEN] + "..."

        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": message,
            "logger": record.name,
            "component": record.name.rpartition(".")[2],
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        for field_name in self.CONTEXT_FIELDS:
            value = getattr(record, field_name, None)
            if value is not None:
                log_entry[field_name] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return orjson.dumps(log_entry, default=str, option=orjson.OPT_PASSTHROUGH_DATACLASS).decode("utf-8")


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure root logger with structured JSON output and per-logger overrides.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit structured JSON logs when True
        logger_levels: Per-logger level overrides (logger name -> level string)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    # stdout carries command output, so logs go to stderr
    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        resolved = getattr(logging, logger_level.upper(), logging.INFO)
        logging.getLogger(logger_name).setLevel(resolved)
