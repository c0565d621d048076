"""Structured logging configuration for github-models.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the github_models namespace
- Level and format from GitHubModelsConfig (GITHUB_MODELS_LOG_LEVEL, GITHUB_MODELS_LOG_FORMAT)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import get_config

LOGGER_NAMESPACE = "github_models"

# Marks the handler owned by configure_logging()
HANDLER_TAG = "_github_models"

# Keys redacted from the "context" object of structured output
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key",
    "authorization", "credential", "auth", "key", "bearer",
}

# Standard LogRecord attributes, never treated as extras
_STANDARD_FIELDS = {
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
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Outputs one JSON object per record with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (github_models hierarchy)
    - message: Log message
    - context: ``extra`` values attached to the record

    Sensitive keys (token, authorization, etc.) are redacted so a token
    passed through ``extra`` never reaches the log sink.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }
        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter, used when GITHUB_MODELS_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure logging for all github_models loggers.

    Args:
        level: Optional log level override. Defaults to the configured
               ``log_level`` (GITHUB_MODELS_LOG_LEVEL, default: WARNING).
        log_format: Optional format override ("json" or "text"). Defaults to
               the configured ``log_format`` (GITHUB_MODELS_LOG_FORMAT, default: json).

    Only the handler installed here is touched; handlers attached to the
    github_models logger by others keep their formatters.
    """
    if level is None or log_format is None:
        config = get_config()
        level = level or config.log_level
        log_format = log_format or config.log_format

    log_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = TextFormatter() if log_format.lower() == "text" else StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    handler = next((h for h in logger.handlers if getattr(h, HANDLER_TAG, False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        setattr(handler, HANDLER_TAG, True)
        logger.addHandler(handler)
    handler.setFormatter(formatter)

    logger.propagate = False
