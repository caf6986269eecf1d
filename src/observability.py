"""Structured Logging — JSON formatter and setup.

Invariants:
    - All records include timestamp, level, logger name, and message
    - Engine ids (project_id, user_id, offer_id, proposal_id) and error_code
      are surfaced when passed through `extra`
    - Library modules only create loggers; setup_logging is called by the host
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "project_id", "user_id", "offer_id", "proposal_id",
    "error_code", "event_type",
)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

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
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach a stream handler to the root logger.

    Args:
        level: logging level name (unknown names fall back to INFO)
        fmt: "json" for JSONFormatter, anything else for plain text

    Returns:
        The installed handler (so callers can remove it again)
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
