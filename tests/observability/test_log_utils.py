"""
Tests for logging helpers.
"""

import logging

import pytest

from rag_engine.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)

LOGGER_NAME = "rag_engine.tests.log_utils"


class TestSafeLogValue:
    """Value flattening."""

    def test_none(self) -> None:
        assert safe_log_value(None) == "None"

    def test_collections_are_summarised(self) -> None:
        """Should never log vectors or dicts verbatim."""
        assert safe_log_value([0.1] * 768) == "vector(768 dims)"
        assert safe_log_value(["a", "b"]) == "list(2 items)"
        assert safe_log_value({"a": 1, "b": 2}) == "dict(2 keys)"

    def test_long_strings_are_truncated(self) -> None:
        """Should cut strings at max_length and report the full size."""
        value = safe_log_value("x" * 30, max_length=10)

        assert value.startswith("x" * 10 + "...")
        assert value.endswith("[30 chars]")


class TestContextLogging:
    """Structured context on log records."""

    def test_context_attached_to_record(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should attach context keys as record attributes."""
        logger = logging.getLogger(LOGGER_NAME)

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log_with_context(logger, logging.INFO, "indexed", pack="recipes", total_files=3)

        [record] = caplog.records
        assert record.pack == "recipes"
        assert record.total_files == "3"

    def test_reserved_keys_are_prefixed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should not clash with built-in LogRecord attributes."""
        logger = logging.getLogger(LOGGER_NAME)

        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log_with_context(logger, logging.INFO, "hello", message="custom", name="pack")

        [record] = caplog.records
        assert record.ctx_message == "custom"
        assert record.ctx_name == "pack"
        assert record.name == LOGGER_NAME

    def test_exception_context(self, caplog: pytest.LogCaptureFixture) -> None:
        """Should record the exception type and message."""
        logger = logging.getLogger(LOGGER_NAME)

        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            log_exception_with_context(
                logger, "failed", ValueError("bad input"), level=logging.WARNING, file_path="a.pdf"
            )

        [record] = caplog.records
        assert record.levelno == logging.WARNING
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad input"
        assert record.file_path == "a.pdf"
        assert record.exc_info is not None
