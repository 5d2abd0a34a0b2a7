"""Unit tests for structured logging configuration."""

import io
import json
import logging
import sys

import pytest

from carebill.infrastructure.logging_config import StructuredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root handlers and level after setup_logging replaces them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestStructuredFormatter:
    """Test suite for StructuredFormatter."""

    def _record(self, msg="Admitted patient 1 (Regular)", exc_info=None):
        return logging.LogRecord(
            name="carebill.domain.ledger",
            level=logging.INFO,
            pathname=__file__,
            lineno=42,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )

    def test_json_fields(self):
        data = json.loads(StructuredFormatter().format(self._record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "carebill.domain.ledger"
        assert data["message"] == "Admitted patient 1 (Regular)"
        assert data["location"].endswith(":42")
        assert "timestamp" in data

    def test_extra_attributes_become_fields(self):
        record = self._record()
        record.patient_id = 1
        record.category = "Regular"
        data = json.loads(StructuredFormatter().format(record))
        assert data["patient_id"] == 1
        assert data["category"] == "Regular"

    def test_exception_included(self):
        try:
            raise RuntimeError("printer jammed")
        except RuntimeError:
            record = self._record(exc_info=sys.exc_info())
        data = json.loads(StructuredFormatter().format(record))
        assert "RuntimeError: printer jammed" in data["exception"]


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_plain_format(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(log_level="INFO", stream=stream)

        logging.getLogger("carebill.test").info("ledger ready")

        assert "INFO     carebill.test: ledger ready" in stream.getvalue()
        assert len(restore_root_logger.handlers) == 1

    def test_json_format(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(use_json=True, log_level="DEBUG", stream=stream)

        logging.getLogger("carebill.test").debug("bus created")

        data = json.loads(stream.getvalue().strip())
        assert data["message"] == "bus created"
        assert data["level"] == "DEBUG"

    def test_level_filters(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(log_level="WARNING", stream=stream)

        logging.getLogger("carebill.test").info("hidden")
        logging.getLogger("carebill.test").warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        setup_logging(log_level="chatty", stream=io.StringIO())
        assert restore_root_logger.level == logging.INFO
