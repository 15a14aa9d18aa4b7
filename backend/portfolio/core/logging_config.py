"""
Structured JSON logging configuration.

This module sets up application-wide JSON logging with:
- Consistent field names across all logs
- Request correlation IDs
- Admin identity on authenticated requests
- Timestamp, level, message, path, status code, latency

Logs are output to stdout in JSON format for easy parsing by
log aggregation systems.

Never pass passwords, raw tokens or token hashes as log fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict


# Attributes every LogRecord carries; anything else came in through extra={...}
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
})


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs log records as single-line JSON objects with consistent fields:
    - timestamp: ISO 8601 format with microseconds (UTC)
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: Log message
    - logger: Logger name (module path)
    - exception: Exception details (if exception occurred)
    - any field passed via extra (request_id, admin_id, path, ...)

    Example output:
        {"timestamp": "2025-11-24T10:30:00.123456+00:00", "level": "INFO",
         "message": "Login succeeded", "logger": "portfolio.services.auth",
         "admin_id": "6f1c...", "request_id": "abc-123"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_data["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_data or value is None:
                continue
            log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True
) -> None:
    """
    Configure application logging.

    Sets up:
    - Root logger with specified level
    - JSON formatter (if json_format=True)
    - StreamHandler to stdout
    - Removes default handlers

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter (True) or simple formatter (False)

    Note:
        Call this once at application startup, before any logging occurs.
    """
    root_logger = logging.getLogger()

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance with given name.

    Example:
        logger = get_logger(__name__)
        logger.info("Processing request", extra={"request_id": "abc-123"})
    """
    return logging.getLogger(name)
