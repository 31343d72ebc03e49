"""JSON logging setup shared by the API and the attendance services.

Log records are rendered as single-line JSON objects on stdout. Anything passed
through ``extra=`` ends up under ``extra_context`` with sensitive keys masked.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

_REDACTED = "[REDACTED]"
_SENSITIVE_FIELDS = {"password", "token", "access_token", "refresh_token", "email"}

# Attributes every LogRecord carries; they are not surfaced as extra context.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def redact_sensitive_data(data: Any, fields: Optional[Iterable[str]] = None) -> Any:
    """Mask sensitive values in nested mappings and sequences.

    Keys are compared case-insensitively. Scalars are returned unchanged.
    """

    fields_set = {field.lower() for field in (fields or _SENSITIVE_FIELDS)}

    if isinstance(data, Mapping):
        redacted: Dict[Any, Any] = {}
        for key, value in data.items():
            if str(key).lower() in fields_set:
                redacted[key] = _REDACTED
            else:
                redacted[key] = redact_sensitive_data(value, fields_set)
        return redacted
    if isinstance(data, (list, tuple, set)):
        return [redact_sensitive_data(item, fields_set) for item in data]
    return data


class JSONFormatter(logging.Formatter):
    """Formatter that renders log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "ts": timestamp.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["error_type"] = record.exc_info[0].__name__
            payload["error"] = str(record.exc_info[1])
            payload["stack"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        }
        if extra:
            payload["extra_context"] = redact_sensitive_data(extra)

        return json.dumps(payload, default=str, separators=(",", ":"))


_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the JSON formatter. Safe to call twice."""

    global _configured
    if _configured:
        return

    if level is None:
        from campus_connect.config import settings

        level = settings.LOG_LEVEL

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers = [handler]
    logging.captureWarnings(True)

    # httpx logs every Supabase round-trip at INFO.
    for noisy_logger in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    _configured = True


__all__ = ["JSONFormatter", "configure_logging", "redact_sensitive_data"]
