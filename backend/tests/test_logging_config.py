"""
Tests for structured JSON logging configuration.

This module tests:
- JSONFormatter (JSON log output)
- setup_logging() (logging configuration)
- get_logger() (logger factory)

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import io
import json
import logging

import pytest

from portfolio.core.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def json_logger():
    """Logger writing JSON lines into a buffer."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())

    logger = logging.getLogger("tests.json_logger")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(handler)

    yield logger, stream

    logger.removeHandler(handler)


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_basic_message(self, json_logger):
        # Arrange
        logger, stream = json_logger

        # Act
        logger.info("Login succeeded")

        # Assert
        record = json.loads(stream.getvalue())
        assert record["message"] == "Login succeeded"
        assert record["level"] == "INFO"
        assert record["logger"] == "tests.json_logger"
        assert "timestamp" in record

    def test_extra_fields_included(self, json_logger):
        logger, stream = json_logger

        logger.warning("Refresh rejected", extra={"reason": "hash mismatch", "admin_id": "a-1"})

        record = json.loads(stream.getvalue())
        assert record["reason"] == "hash mismatch"
        assert record["admin_id"] == "a-1"

    def test_none_extra_fields_skipped(self, json_logger):
        logger, stream = json_logger

        logger.info("Request started", extra={"request_id": None, "path": "/health"})

        record = json.loads(stream.getvalue())
        assert "request_id" not in record
        assert record["path"] == "/health"

    def test_exception_included(self, json_logger):
        logger, stream = json_logger

        try:
            raise ValueError("bad value")
        except ValueError:
            logger.exception("Failed")

        record = json.loads(stream.getvalue())
        assert "ValueError: bad value" in record["exception"]

    def test_single_line(self, json_logger):
        logger, stream = json_logger

        logger.info("multi\nline")

        assert stream.getvalue().count("\n") == 1


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_json_handler_installed(self):
        setup_logging(level="DEBUG", json_format=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_plain_format(self):
        setup_logging(level="WARNING", json_format=False)

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="LOUD")

        assert logging.getLogger().level == logging.INFO


def test_get_logger_returns_named_logger():
    assert get_logger("portfolio.test").name == "portfolio.test"
