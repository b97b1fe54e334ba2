"""Structured Logging - JSON formatter, request correlation and logging setup.

Invariants:
    - Every JSON line has timestamp, level, logger and message
    - request_id, command, user_id, error_code, path and duration_ms appear only
      when set on the record
    - RequestContextFilter stamps request_id from the current task's context, so
      records logged deep in the dispatcher still correlate to their request
    - setup_logging is idempotent: calling it again replaces its own handler

Design Decisions:
    - ContextVar over thread-locals: each asyncio task sees its own request id
    - JSON in production (LOG_FORMAT=json), plain text for local runs and tests
"""

import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

CONTEXT_FIELDS = (
    "request_id", "command", "user_id", "error_code", "path", "duration_ms",
)

_HANDLER_NAME = "conduit"


class RequestContextFilter(logging.Filter):
    """Copy the active request id onto records that don't carry one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is None:
                continue
            # UUIDs and other ids are not JSON-native
            payload[key] = value if isinstance(value, (int, float)) else str(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.addFilter(RequestContextFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # SQL echo belongs to DEBUG runs only
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
