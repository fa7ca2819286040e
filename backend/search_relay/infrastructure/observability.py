"""Structured Logging: JSON formatter, secret redaction, and setup.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (attempt, cause, classification, ...) surfaced when present
    - Configured secrets are replaced with "***" before any handler formats a record,
      traceback text included
    - At most one relay handler on the root logger, however often setup runs
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Redaction as a handler filter: applies to every logger that propagates to root,
      including uvicorn and httpx
    - setup_logging called on startup via lifespan; it replaces its own handler
"""

import logging
import json
from collections.abc import Iterable
from datetime import datetime, timezone

REDACTED = "***"

HANDLER_NAME = "search_relay"

_traceback_formatter = logging.Formatter()

_EXTRA_FIELDS = (
    "attempt", "attempts", "cause", "timed_out", "error_code", "path",
    "port", "upstream_status", "classification", "records_found",
    "transaction_id", "status_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

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
            log["exception"] = record.exc_text or self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class SecretRedactionFilter(logging.Filter):
    """Scrub known secret values from the message, string extras and traceback."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets = tuple(s for s in secrets if s)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        scrubbed = self._scrub(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if isinstance(val, str):
                record.__dict__[key] = self._scrub(val)
        if record.exc_info and not record.exc_text:
            record.exc_text = _traceback_formatter.formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self._scrub(record.exc_text)
        return True

    def _scrub(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text


def setup_logging(
    level: str = "INFO", fmt: str = "json", redact: Iterable[str] = (),
):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    handler.addFilter(SecretRedactionFilter(redact))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
