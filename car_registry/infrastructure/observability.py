"""Structured Logging — JSON formatter and setup for the registry's log records.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields surfaced when present: car_id / version (services, store),
      criteria (read service), error_code / method / path (error handlers)
    - JSON format in production, human-readable in development
    - setup_logging() replaces earlier root handlers, so repeated lifespans
      never duplicate output

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = ("car_id", "version", "criteria", "error_code", "method", "path")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        # criteria values may be Decimal / date
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    for existing in list(logging.root.handlers):
        logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
