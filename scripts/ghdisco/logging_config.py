"""Structured JSON logging configuration."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

from scripts.ghdisco.config import DEFAULT_LOG_LEVEL, LOG_LEVELS

_EXTRA_FIELDS = ("provider", "org", "query", "page", "records", "status_code")


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        return json.dumps(log_entry)


def configure_logging(level: str = DEFAULT_LOG_LEVEL, stream: Optional[TextIO] = None) -> None:
    """Attach the JSON handler to the ghdisco logger tree.

    Output goes to stderr by default; stdout is reserved for the report.
    Logging is configured before flags are validated, so an unknown level
    starts at the default and is rejected by load_config afterwards.
    """
    name = level.upper()
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger("ghdisco")
    root.setLevel(name if name in LOG_LEVELS else DEFAULT_LOG_LEVEL)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False
