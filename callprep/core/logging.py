"""Structured logging for CallPrep.

Two sinks, one namespace:
    - console: short human-readable lines
    - file: one JSON object per line, rotated at 5 MB

Every record may carry a ``context`` dict (call_id, user_id, phone, ...).
Before either sink sees it, RedactionFilter masks phone numbers and blanks
credential values, so an API key or a full number never lands in a log.

Usage:
    from callprep.core.logging import get_logger, setup_logging

    setup_logging()  # once, from the entry point
    logger = get_logger(__name__)
    logger.info("Call prepared", extra={"context": {"call_id": "call_1_abc"}})
"""

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

ROOT_LOGGER_NAME = "callprep"
LOG_FILE_NAME = "callprep.log"

# Context keys whose values are phone numbers or secrets.
PHONE_KEYS = frozenset({"phone", "phone_number", "to", "from"})
SECRET_KEYS = frozenset({"api_key", "secret", "secret_key", "token", "sig", "authorization"})


def mask_phone(phone: str) -> str:
    """Mask a phone number for log context, keeping the last four digits.

    >>> mask_phone("18778406250")
    '***6250'
    """
    phone = str(phone)
    if phone.startswith("***"):
        return phone
    digits = "".join(c for c in phone if c.isdigit())
    if len(digits) <= 4:
        return "***"
    return f"***{digits[-4:]}"


def redact_context(context: dict[str, Any]) -> dict[str, Any]:
    """Copy of a log context with phones masked and secrets blanked."""
    redacted: dict[str, Any] = {}
    for key, value in context.items():
        lowered = key.lower()
        if lowered in SECRET_KEYS:
            redacted[key] = "[redacted]" if value else value
        elif lowered in PHONE_KEYS and value:
            redacted[key] = mask_phone(value)
        else:
            redacted[key] = value
    return redacted


class RedactionFilter(logging.Filter):
    """Rewrites record.context in place before formatting."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = redact_context(context)
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "context", None):
            log_data["context"] = record.context
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable format for console output."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{datetime.now():%H:%M:%S} {record.levelname[:4]:4s} {record.name}: {record.getMessage()}"
        context = getattr(record, "context", None)
        if context:
            line += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


_logging_initialized = False


def setup_logging(
    log_dir: Optional[Path] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """Initialize logging system.

    Idempotent; later calls are ignored until reset_logging().

    Args:
        log_dir: Directory for log files. Defaults to ~/.callprep/logs
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
    """
    global _logging_initialized

    if _logging_initialized:
        return

    if log_dir is None:
        log_dir = Path.home() / ".callprep" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    redaction = RedactionFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ConsoleFormatter())
    console_handler.addFilter(redaction)
    root_logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(JSONFormatter())
    file_handler.addFilter(redaction)
    root_logger.addHandler(file_handler)

    _logging_initialized = True
    root_logger.info("Logging initialized", extra={"context": {"log_dir": str(log_dir)}})


def reset_logging() -> None:
    """Close and detach the handlers installed by setup_logging()."""
    global _logging_initialized

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        if any(isinstance(f, RedactionFilter) for f in handler.filters):
            root_logger.removeHandler(handler)
            handler.close()
    _logging_initialized = False


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``callprep`` namespace.

    Module names inside the package are used as-is; anything else
    ("main", "test.module") is prefixed.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
