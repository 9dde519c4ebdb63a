"""Structured Logging: one JSON object per line, keyed by the ids a join touches.

Invariants:
    - Every line carries the record time, level, logger and rendered message
    - Admission extras (group_id, user_id, outcome) and error extras
      (error_code, path, attempt) appear only when set on the record
    - Re-running setup_logging swaps the StudyHub handler instead of stacking another

Design Decisions:
    - Timestamp taken from record.created so queued or delayed lines keep their event time
    - SQLAlchemy engine chatter pinned to WARNING unless LOG_LEVEL is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = ("group_id", "user_id", "outcome", "error_code", "path", "attempt")
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_installed: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    global _installed
    root = logging.getLogger()
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))

    if _installed is not None:
        root.removeHandler(_installed)
    root.addHandler(handler)
    _installed = handler

    numeric = logging.getLevelName(level.upper())
    root.setLevel(numeric if isinstance(numeric, int) else logging.INFO)
    if root.level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
