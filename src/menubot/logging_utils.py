"""Logging setup for menubot with credential redaction and site/request context."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

REDACTED = "[redacted]"

# (pattern, replacement) pairs applied before the literal secrets
_CREDENTIAL_PATTERNS = (
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-._~+/=]+)", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"(client_secret=)([^&\s]+)", re.IGNORECASE), r"\1" + REDACTED),
    (
        re.compile(r"""(["']?access_token["']?\s*[:=]\s*["']?)([^"'&\s,}]+)""", re.IGNORECASE),
        r"\1" + REDACTED,
    ),
)

_CONTEXT_FIELDS = ("request_id", "site")

_active_filter: Optional["SensitiveDataFilter"] = None


def _redact(value: str, secrets: Iterable[str]) -> str:
    for pattern, replacement in _CREDENTIAL_PATTERNS:
        value = pattern.sub(replacement, value)
    for secret in secrets:
        value = value.replace(secret, REDACTED)
    return value


class SensitiveDataFilter(logging.Filter):
    """Mask bearer tokens, OAuth form fields and known secret values in every record.

    Besides the secrets handed over at configuration time, values issued at runtime can be
    added with :meth:`add_secret`. Passing a ``slot`` keeps one value per slot, so a rotating
    bearer token replaces its predecessor instead of piling up.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self._static: set[str] = set()
        self._slots: dict[str, str] = {}
        for secret in secrets:
            self.add_secret(secret)

    @property
    def secrets(self) -> frozenset[str]:
        return frozenset(self._static) | frozenset(self._slots.values())

    def add_secret(self, secret: Optional[str], *, slot: Optional[str] = None) -> None:
        value = (secret or "").strip()
        if not value:
            return
        if slot is None:
            self._static.add(value)
        else:
            self._slots[slot] = value

    def filter(self, record: logging.LogRecord) -> bool:
        secrets = self.secrets
        message = record.getMessage()
        redacted = _redact(message, secrets)
        if redacted != message:
            record.msg = redacted
            record.args = ()

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if isinstance(value, str):
                setattr(record, field, _redact(value, secrets))
        return True


class PlainFormatter(logging.Formatter):
    """Pipe-separated line with request id and site appended when a record carries them."""

    def __init__(self) -> None:
        super().__init__(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{field}={value}"
            for field in _CONTEXT_FIELDS
            if (value := getattr(record, field, None))
        ]
        return f"{line} | {' '.join(context)}" if context else line


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in _CONTEXT_FIELDS:
            if value := getattr(record, field, None):
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def site_logger(logger: logging.Logger, site_name: str) -> logging.LoggerAdapter:
    """Return an adapter that tags every record with the site it concerns."""

    return logging.LoggerAdapter(logger, {"site": site_name})


def register_secret(secret: Optional[str], *, slot: Optional[str] = None) -> None:
    """Redact ``secret`` from all further output of the configured handler.

    With ``slot`` the value replaces whatever was registered under the same slot before.
    """

    if _active_filter is not None:
        _active_filter.add_secret(secret, slot=slot)


def active_filter() -> Optional[SensitiveDataFilter]:
    return _active_filter


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single redacting stream handler on the root logger."""

    global _active_filter

    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler()
    formatter: logging.Formatter
    if (fmt or "plain").lower() == "json":
        formatter = JsonFormatter()
    else:
        formatter = PlainFormatter()
    handler.setFormatter(formatter)

    redaction = SensitiveDataFilter(secrets)
    handler.addFilter(redaction)
    _active_filter = redaction

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    logging.captureWarnings(True)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.setLevel(level)
        server_logger.propagate = True

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


__all__ = [
    "JsonFormatter",
    "PlainFormatter",
    "REDACTED",
    "SensitiveDataFilter",
    "active_filter",
    "configure_logging",
    "register_secret",
    "site_logger",
]
