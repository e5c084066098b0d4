"""
Logging configuration for the catalog service.

Console output is human readable and carries the request correlation ID.
Errors are additionally written as JSON lines to a file, and all records
can be shipped to Loki when LOKI_ENABLED is set.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

from catalog.constants import LOKI_MAX_LOG_SIZE_BYTES
from catalog.settings import app_settings

# Request-scoped fields merged into every JSON log record
log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# LogRecord attributes that are not copied as extra fields
_RESERVED_RECORD_ATTRS = frozenset(
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
        "correlation_id",
    }
)


def get_correlation_id() -> str:
    """
    Get correlation ID from context, safe wrapper for logging.

    Returns:
        Correlation ID or empty string if not available.
    """
    try:
        from catalog.middlewares.correlation_id import (
            get_correlation_id as _get_cid,
        )

        return _get_cid()
    except ImportError:
        return ""


def set_log_context(**kwargs: Any) -> None:
    """
    Set contextual fields for structured logging.

    Example:
        >>> set_log_context(endpoint="/api/authors", method="GET")
        >>> logger.info("Processing request")  # includes endpoint and method
    """
    current = dict(log_context.get())
    current.update(kwargs)
    log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get current log context."""
    return log_context.get()


def clear_log_context() -> None:
    """Clear the log context (useful at end of request)."""
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Each record becomes one JSON object with the standard fields
    (timestamp, level, logger, message, location), the correlation ID,
    the request log context, and any `extra=` fields passed to the logger.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "environment": app_settings.ENVIRONMENT,
        }

        correlation_id = get_correlation_id()
        if correlation_id:
            log_data["request_id"] = correlation_id

        log_data.update(get_log_context())

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS:
                log_data[key] = value

        json_str = json.dumps(log_data, default=str)
        if len(json_str) > LOKI_MAX_LOG_SIZE_BYTES:
            log_data["message"] = (
                log_data["message"][: LOKI_MAX_LOG_SIZE_BYTES - 1000]
                + "... [TRUNCATED]"
            )
            json_str = json.dumps(log_data, default=str)

        return json_str


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    INFO records are short; everything else also shows the code location.
    """

    INFO_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(message)s"
    ERROR_FMT = "%(asctime)s - [%(correlation_id)s] %(levelname)s: %(module)s.%(funcName)s:%(lineno)d - %(message)s"
    DATE_FMT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._info_formatter = logging.Formatter(
            self.INFO_FMT, datefmt=self.DATE_FMT
        )
        self._detail_formatter = logging.Formatter(
            self.ERROR_FMT, datefmt=self.DATE_FMT
        )

    def format(self, record: logging.LogRecord) -> str:
        record.correlation_id = get_correlation_id() or "-"

        if record.levelno == logging.INFO:
            return self._info_formatter.format(record)
        return self._detail_formatter.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the root logger.

    This function sets up:
    - Console handler with human-readable format
    - File handler for errors (JSON format)
    - Loki handler for centralized logging (if enabled)

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, app_settings.LOG_LEVEL.upper()))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(HumanReadableFormatter())
    logger.addHandler(console_handler)

    try:
        file_handler = logging.FileHandler(app_settings.LOG_FILE_PATH)
        file_handler.setLevel(logging.ERROR)
        file_handler.setFormatter(StructuredJSONFormatter())
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"Could not create file handler: {e}")

    if app_settings.LOKI_ENABLED:
        try:
            from logging_loki import LokiHandler

            loki_handler = LokiHandler(
                url=f"{app_settings.LOKI_URL}/loki/api/v{app_settings.LOKI_VERSION}/push",
                tags={
                    "application": "catalog-service",
                    "environment": app_settings.ENVIRONMENT,
                },
                version=app_settings.LOKI_VERSION,
            )
            loki_handler.setLevel(logging.INFO)
            loki_handler.setFormatter(StructuredJSONFormatter())
            logger.addHandler(loki_handler)
            logger.info("Loki handler configured successfully")
        except Exception as e:
            logger.warning(f"Could not configure Loki handler: {e}")

    # Disable logging during pytest runs
    if sys.argv[0].split("/")[-1] in ["pytest"]:
        logging.disable(logging.ERROR)

    return logger


# Create default logger instance
logger = setup_logging()
