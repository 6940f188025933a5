"""Tests for logging configuration and helpers."""

import json
import logging
import sys

import pytest
from pydantic import ValidationError

from lightfn import LoggingConfig, LogContext, setup_logging, configure_logging
from lightfn.logging import StructuredFormatter, SimpleFormatter, DetailedFormatter


@pytest.fixture
def restore_root_logger():
    """Put root handlers and level back after a test reconfigures them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(message="hello", **attrs):
    record = logging.LogRecord("lightfn.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestLoggingConfig:
    """Test LoggingConfig validation."""

    def test_default_values(self):
        """Test default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == "simple"
        assert config.file is None

    def test_all_valid_log_levels(self):
        """Test that all valid log levels are accepted."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR"]:
            assert LoggingConfig(level=level).level == level

    def test_level_is_case_insensitive(self):
        """Test that level names are normalized to uppercase, as the env loader passes them through verbatim."""
        assert LoggingConfig(level="info").level == "INFO"
        assert LoggingConfig(level="Warning").level == "WARNING"

    def test_format_is_case_insensitive(self):
        """Test that format names are normalized to lowercase."""
        assert LoggingConfig(format="JSON").format == "json"

    def test_rejects_invalid_values(self):
        """Test that invalid levels and formats are rejected."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")
        with pytest.raises(ValidationError):
            LoggingConfig(format="xml")

    def test_rejects_unknown_fields(self):
        """Test that typos in field names are caught."""
        with pytest.raises(ValidationError):
            LoggingConfig(levl="INFO")


class TestFormatters:
    """Tests for the log formatters."""

    def test_structured_formatter_emits_json(self):
        """Test that the JSON formatter includes core fields."""
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "lightfn.test"
        assert data["message"] == "hello"
        assert "timestamp" in data

    def test_structured_formatter_merges_extra_fields(self):
        """Test that extra_fields end up at the top level."""
        record = make_record(extra_fields={"value_type": "Handle", "obj": object()})
        data = json.loads(StructuredFormatter().format(record))

        assert data["value_type"] == "Handle"
        assert data["obj"].startswith("<object")

    def test_structured_formatter_includes_exception(self):
        """Test that exception details are serialized."""
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record(exc_info=sys.exc_info())

        data = json.loads(StructuredFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad"

    def test_text_formatters(self):
        """Test simple and detailed formats."""
        assert SimpleFormatter().format(make_record()) == "INFO     | lightfn.test | hello"
        assert "lightfn.test" in DetailedFormatter().format(make_record())


class TestSetupLogging:
    """Tests for setup_logging() and configure_logging()."""

    def test_console_handler_format(self, restore_root_logger):
        """Test that the console handler uses the requested format."""
        setup_logging(level="DEBUG", format="json")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_file_handler_writes_json(self, restore_root_logger, tmp_path):
        """Test that file logs are structured."""
        log_file = tmp_path / "logs" / "lightfn.log"
        configure_logging(LoggingConfig(level="INFO", format="simple", file=str(log_file)))

        logging.getLogger("lightfn.test").info("to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        line = log_file.read_text().strip().splitlines()[-1]
        assert json.loads(line)["message"] == "to file"


class TestLogContext:
    """Tests for LogContext."""

    def test_adds_fields_inside_context(self, caplog):
        """Test that records created in the context carry the fields."""
        logger = logging.getLogger("lightfn.test")

        with caplog.at_level(logging.INFO, logger="lightfn.test"):
            with LogContext(logger, request_id="abc"):
                logger.info("inside")
            logger.info("outside")

        inside, outside = caplog.records
        assert inside.extra_fields == {"request_id": "abc"}
        assert not hasattr(outside, "extra_fields")
