"""Structured Logging — JSON formatter and setup for the desktop client.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (command, timer_id, todo_id, error_code) surfaced when present
    - JSON format by default, human-readable "text" format for local debugging

Design Decisions:
    - JSONFormatter on stdlib logging: log lines can be shipped next to the
      backend's own logs without a second parser
    - setup_logging called from client_session(); handlers are not duplicated
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = ("command", "timer_id", "todo_id", "error_code", "view")
_HANDLER_NAME = "countdown_todo"


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging for the client. Safe to call more than once."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
