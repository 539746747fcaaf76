"""
Structured logging configuration for mbxapi.

Provides JSON-formatted (or plain) log output with:
- Credential filtering: API keys, secrets and signatures never reach a log line
- URL normalization: query strings are dropped, so signed queries are not logged
- Bounded values: long lists and deep dicts are truncated

Usage:
    from mbxapi.logging_config import setup_logging, get_logger

    setup_logging()  # Call once at startup
    logger = get_logger(__name__)
    logger.info("message", extra={"key": "value"})
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit

# Matches URLs, with or without query strings
_URL_PATTERN = re.compile(r"(https?://[^\s\"'<>]+)")
# Sensitive patterns that might appear in free text
_SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # X-MBX-APIKEY header echoed in text
    (re.compile(r"x-mbx-apikey[=:\s]+['\"]?[\w\-]+['\"]?", re.I), "[API_KEY]"),
    # api_key=..., apiKey: ...
    (re.compile(r"\b(api[_-]?key|apikey)[=:]\s*['\"]?[\w\-]+['\"]?", re.I), "[API_KEY]"),
    # api_secret=..., secret: ...
    (re.compile(r"\b(api[_-]?)?secret[=:]\s*['\"]?[\w\-]+['\"]?", re.I), "[SECRET]"),
    # signature=<hex> outside a URL
    (re.compile(r"\bsignature=[0-9a-f]+", re.I), "signature=[REDACTED]"),
]

# Extra fields that should never appear in logs
BLOCKED_FIELDS: frozenset[str] = frozenset(
    {
        "api_key",
        "apikey",
        "api_secret",
        "secret",
        "signature",
        "credential",
        "password",
        "token",
        "authorization",
        "x-mbx-apikey",
    }
)

# Fields replaced by a placeholder or normalized form
HIGH_CARDINALITY_FIELDS: dict[str, str] = {
    "url": "endpoint",  # Path only
    "body": "[BODY]",
    "payload": "[PAYLOAD]",
    "params": "[PARAMS]",  # Signed params carry timestamp/signature
    "query": "[QUERY]",
}

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)

_MAX_LIST_ITEMS = 10
_MAX_DEPTH = 3


def _normalize_url(url: str) -> str:
    """Reduce a URL to its path."""
    return urlsplit(url).path or "/"


def _sanitize_url_in_text(match: re.Match[str]) -> str:
    path = _normalize_url(match.group(1))
    return path if path != "/" else "[URL]"


def _sanitize_text(text: str) -> str:
    """Strip query strings from URLs and redact credentials in free text."""
    if not text:
        return text

    result = _URL_PATTERN.sub(_sanitize_url_in_text, text)
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def _filter_log_record(record: dict[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    """Drop blocked fields and normalize the rest, recursing into dicts."""
    if _depth > _MAX_DEPTH:
        return {"_truncated": "max depth exceeded"}

    filtered: dict[str, Any] = {}

    for key, value in record.items():
        key_lower = key.lower()

        # Exact or partial match on a blocked word
        if any(blocked in key_lower for blocked in BLOCKED_FIELDS):
            continue

        if key_lower in HIGH_CARDINALITY_FIELDS:
            if key_lower == "url" and isinstance(value, str):
                filtered["endpoint"] = _normalize_url(value)
            else:
                filtered[key] = HIGH_CARDINALITY_FIELDS[key_lower]
            continue

        if isinstance(value, (int, float, bool, type(None))):
            filtered[key] = value
        elif isinstance(value, str):
            filtered[key] = _sanitize_text(value)
        elif isinstance(value, (list, tuple)):
            if len(value) <= _MAX_LIST_ITEMS:
                filtered[key] = list(value)
            else:
                filtered[key] = f"[list:{len(value)} items]"
        elif isinstance(value, dict):
            filtered[key] = _filter_log_record(value, _depth=_depth + 1)
        else:
            filtered[key] = _sanitize_text(str(value))

    return filtered


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Output format:
    {"ts":"2024-01-01T00:00:00.000+00:00","level":"INFO","logger":"mbxapi.client","msg":"..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": _sanitize_text(record.getMessage()),
        }

        if record.levelno >= logging.WARNING:
            log_dict["file"] = record.filename
            log_dict["line"] = record.lineno

        if record.exc_info:
            log_dict["exc"] = _sanitize_text(self.formatException(record.exc_info))

        extra = _extra_fields(record)
        if extra:
            log_dict.update(_filter_log_record(extra))

        return json.dumps(log_dict, default=str, ensure_ascii=False)


class SimpleFormatter(logging.Formatter):
    """Human-readable output with filtered extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname:8s} {record.name}: {_sanitize_text(record.getMessage())}"

        extra = _extra_fields(record)
        if extra:
            filtered = _filter_log_record(extra)
            if filtered:
                extra_str = " ".join(f"{k}={v}" for k, v in filtered.items())
                base = f"{base} | {extra_str}"

        return base


def setup_logging(
    *,
    level: int | str = logging.INFO,
    json_format: bool = True,
    stream: Any = None,
) -> None:
    """Configure root logging. Call once at application startup.

    Args:
        level: Log level (default INFO).
        json_format: Use JSON formatter (default True).
        stream: Output stream (default stderr).
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else SimpleFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # aiohttp access/client logs may include full URLs
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically ``get_logger(__name__)``)."""
    return logging.getLogger(name)
