"""Structured logging helpers for the recommendation engine."""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}

# Per-request outcome fields, grouped under ``recommendation`` in the JSON line.
RECOMMENDATION_FIELDS = ("rec_type", "cache", "judge_status", "result_count")

# Request payload keys that carry user data.
_REDACT_KEYS = frozenset(
    {
        "user_id",
        "api_key",
        "image_url",
        "wardrobe_items",
        "primary_item",
        "candidate_items",
        "notes",
    }
)
_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+")
_URL = re.compile(r"https?://([^/\s?#]+)\S*", re.IGNORECASE)


class JsonFormatter(logging.Formatter):
    """Emit one JSON object per record, with request outcome fields grouped."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        record_message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record_message,
            "event": getattr(record, "event", record_message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }

        outcome: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key in payload:
                continue
            if key in RECOMMENDATION_FIELDS:
                if value is not None:
                    outcome[key] = value
                continue
            payload[key] = redact_for_log({key: value})[key]
        if outcome:
            payload["recommendation"] = outcome
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Configure root logging with JSON output."""

    desired_level = level or os.getenv("LOG_LEVEL", "INFO")
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=desired_level, handlers=[handler])


def redact_for_log(payload: Any) -> Any:
    """Recursively scrub user identifiers, wardrobe payloads, emails and URL paths.

    URLs keep only their host so judge endpoints stay traceable.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _URL.sub(r"[url:\1]", _EMAIL.sub("[redacted-email]", payload))
    if isinstance(payload, (list, tuple)):
        return [redact_for_log(item) for item in payload]
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _REDACT_KEYS and value is not None else redact_for_log(value)
            for key, value in payload.items()
        }
    return str(payload)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger ensuring configuration is applied."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Return an existing correlation id or assign a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    new_id = uuid.uuid4().hex
    CORRELATION_ID.set(new_id)
    return new_id


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit a structured log entry with correlation metadata."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id to one named engine operation."""

    token = CORRELATION_ID.set(attributes.get("correlation_id") or ensure_correlation_id())
    try:
        scoped_id = CORRELATION_ID.get()
        logging.getLogger(__name__).debug("operation %s scoped to %s", name, scoped_id)
        yield scoped_id
    finally:
        CORRELATION_ID.reset(token)


__all__ = [
    "configure_logging",
    "ensure_correlation_id",
    "get_logger",
    "JsonFormatter",
    "log_event",
    "redact_for_log",
    "operation_context",
    "RECOMMENDATION_FIELDS",
]
