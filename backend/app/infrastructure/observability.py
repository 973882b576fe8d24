"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Entity ids (user_id, review_id, drink_id), collection, error_code and the
      request path are surfaced when a log call passes them in extra=
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - Timestamp taken from the record (creation time), not from formatting time
    - SQLAlchemy engine chatter capped at WARNING unless the app runs at DEBUG
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "user_id", "review_id", "drink_id", "collection", "error_code", "path",
)

_HANDLER_NAME = "drinkreview"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: getattr(record, key) for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler. fmt is "json" or anything else for plain text."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    root.addHandler(handler)

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        numeric_level if numeric_level <= logging.DEBUG else logging.WARNING,
    )
