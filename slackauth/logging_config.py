# slackauth
# Copyright (C) 2026 StrateCode
# Licensed under the GNU Affero General Public License v3 (AGPLv3)

"""
Structured logging configuration for the slackauth service.

Provides JSON-formatted logging with context and redaction of OAuth secrets.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SensitiveDataFilter(logging.Filter):
    """
    Filter to redact sensitive data from log records.

    Ensures access tokens and the app's client secret never appear in logs,
    whether they are part of the message, its args, or structured extras.
    """

    PATTERNS = [
        # Slack tokens
        (re.compile(r"(xoxb-[a-zA-Z0-9-]+)"), "REDACTED_BOT_TOKEN"),
        (re.compile(r"(xoxp-[a-zA-Z0-9-]+)"), "REDACTED_USER_TOKEN"),
        (re.compile(r"(xoxa-[a-zA-Z0-9-]+)"), "REDACTED_ACCESS_TOKEN"),
        (re.compile(r"(xoxr-[a-zA-Z0-9-]+)"), "REDACTED_REFRESH_TOKEN"),
        # Bearer tokens
        (re.compile(r"(Bearer\s+[a-zA-Z0-9._-]+)"), "Bearer REDACTED_TOKEN"),
        # Form and query encoded secrets
        (re.compile(r"(client_secret=)[^&\s]+", re.IGNORECASE), r"\1REDACTED"),
        (re.compile(r"(code=)[^&\s]+", re.IGNORECASE), r"\1REDACTED"),
        # JSON field patterns
        (re.compile(r'("access_token"\s*:\s*")[^"]*(")', re.IGNORECASE), r"\1REDACTED\2"),
        (re.compile(r'("bot_access_token"\s*:\s*")[^"]*(")', re.IGNORECASE), r"\1REDACTED\2"),
        (re.compile(r'("client_secret"\s*:\s*")[^"]*(")', re.IGNORECASE), r"\1REDACTED\2"),
    ]

    SENSITIVE_KEYS = {
        "access_token",
        "bot_access_token",
        "client_secret",
        "secret",
        "token",
        "authorization",
        "code",
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive data from the message, args and extras."""
        if isinstance(record.msg, str):
            record.msg = self._redact_value(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = self._redact_dict(record.args)
            elif isinstance(record.args, (list, tuple)):
                record.args = tuple(self._redact_value(arg) for arg in record.args)

        for key in list(record.__dict__):
            if key.lower() in self.SENSITIVE_KEYS:
                setattr(record, key, "REDACTED")

        return True

    def _redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = {}
        for key, value in data.items():
            if key.lower() in self.SENSITIVE_KEYS:
                result[key] = "REDACTED"
            elif isinstance(value, dict):
                result[key] = self._redact_dict(value)
            else:
                result[key] = self._redact_value(value)
        return result

    def _redact_value(self, value: Any) -> Any:
        if not isinstance(value, str):
            return value

        for pattern, replacement in self.PATTERNS:
            value = pattern.sub(replacement, value)

        return value


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    # Reserved LogRecord attributes that should not be included as extra fields
    RESERVED_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "getMessage", "message", "asctime", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
            log_data["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None

        # Add all extra fields passed via extra={}
        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS and not key.startswith("_") and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", log_format: str = "text", stream: Optional[TextIO] = None) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type ('json' or 'text')
        stream: Where records are written (default: stdout)
    """
    level = getattr(logging, log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(level)

    if log_format.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(console_handler)

    # Set third-party library log levels
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.INFO if level <= logging.DEBUG else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def log_error_with_context(logger: logging.Logger, message: str, error: Exception, **context) -> None:
    """
    Log an error with its type, message and any extra context.

    Args:
        logger: Logger instance
        message: Error message
        error: Exception that occurred
        **context: Additional context fields
    """
    extra = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **context,
    }

    if getattr(error, "error_code", None):
        extra["error_code"] = error.error_code
    if getattr(error, "status_code", None) is not None:
        extra["status_code"] = error.status_code

    logger.error(message, extra=extra)
