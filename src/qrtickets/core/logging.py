"""Logging setup: text or JSON output, buyer-data redaction, correlation IDs."""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

from qrtickets.core.context import get_correlation_id

# Keys whose values never reach the log output
SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"e-?mail", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"authorization", re.IGNORECASE),
]

EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")

# Data URLs (QR payloads) are huge and useless in logs
DATA_URL_PATTERN = re.compile(r"data:image/[a-z]+;base64,[A-Za-z0-9+/=]+")

REDACTED = "***REDACTED***"

_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "correlation_id"}


def is_sensitive_key(key: str) -> bool:
    return any(p.search(key) for p in SENSITIVE_PATTERNS)


def redact_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively redact sensitive fields from a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(key):
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = redact_dict(value)
        elif isinstance(value, list):
            result[key] = [redact_dict(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, str):
            result[key] = redact_string(value)
        else:
            result[key] = value
    return result


def redact_string(text: str) -> str:
    """Mask e-mail addresses and shorten QR data URLs in free-form text."""
    text = EMAIL_PATTERN.sub(REDACTED, text)
    return DATA_URL_PATTERN.sub("data:image/png;base64,<…>", text)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_string(record.getMessage()),
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        log_entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": redact_string(str(record.exc_info[1])),
                "traceback": self.formatException(record.exc_info),
            }

        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS}
        if extras:
            log_entry["extra"] = redact_dict(extras)

        return json.dumps(log_entry, default=str)


class RedactingFormatter(logging.Formatter):
    """Human-readable formatter that includes the correlation ID when present."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(
            fmt=fmt or "%(asctime)s [%(levelname)s] %(name)s%(cid)s: %(message)s",
            datefmt=datefmt or "%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None)
        record.cid = f" [{correlation_id}]" if correlation_id else ""
        return redact_string(super().format(record))


class CorrelationFilter(logging.Filter):
    """Copy the request correlation ID onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for structured JSON output, "text" for human-readable.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(RedactingFormatter())
    handler.addFilter(CorrelationFilter())
    root.addHandler(handler)

    # Request lines come from our own middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
