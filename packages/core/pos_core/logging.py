from __future__ import annotations

import json
import logging
import re
import sys
import time
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO, Any

REDACTED = "***REDACTED***"

# LogRecord attributes copied into the JSON line when a caller set them via ``extra``
STRUCTURED_FIELDS = (
    "event",
    "method",
    "path",
    "status",
    "attempt",
    "waiters",
    "latency_ms",
    "user_id",
)

_SECRET_PATTERNS = (
    (re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=]+", re.IGNORECASE), r"\g<1>" + REDACTED),
    (re.compile(r"\beyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*"), REDACTED),
    (re.compile(r'("(?:access|refresh|password)"\s*:\s*")[^"]*(")'), r"\g<1>" + REDACTED + r"\g<2>"),
)

_request_id: ContextVar[str | None] = ContextVar("pos_request_id", default=None)


def redact(text: Any) -> str:
    """Mask bearer tokens, bare JWTs and token/password JSON values."""
    out = str(text)
    for pattern, repl in _SECRET_PATTERNS:
        out = pattern.sub(repl, out)
    return out


@contextmanager
def request_id_context(request_id: str) -> Iterator[None]:
    marker = _request_id.set(request_id)
    try:
        yield
    finally:
        _request_id.reset(marker)


def current_request_id() -> str | None:
    return _request_id.get()


class JsonFormatter(logging.Formatter):
    """One JSON object per line; secrets are masked in the message and traceback."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": int(time.time() * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        line.update({f: getattr(record, f) for f in STRUCTURED_FIELDS if hasattr(record, f)})

        rid = getattr(record, "request_id", None) or _request_id.get()
        if rid:
            line["request_id"] = rid
        if record.exc_info:
            line["exc"] = redact(self.formatException(record.exc_info))
        return json.dumps(line, ensure_ascii=False, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """Adapter whose bound context is merged under any per-call ``extra``."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def setup_logging(level: str = "INFO", *, stream: IO[str] | None = None) -> None:
    lvl = logging.getLevelName(level.upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(lvl)

    # httpx logs each request line, query string included, at INFO
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(max(lvl, logging.WARNING))


def get_logger(name: str, **context: Any) -> ContextAdapter:
    return ContextAdapter(logging.getLogger(name), context)
