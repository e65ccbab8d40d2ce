"""Tests for correlation IDs and the logging helpers."""

import io
import logging
from datetime import datetime
from uuid import UUID

import pytest

from collabdoc.boundary.db.models import DecisionStatus
from collabdoc.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from collabdoc.observability.log_utils import log_with_context, safe_log_value
from collabdoc.observability.logger import CorrelationIdFilter, configure_logging


@pytest.fixture(autouse=True)
def reset_correlation_id():
    yield
    clear_correlation_id()


class TestCorrelationId:
    def test_set_generates_when_missing(self) -> None:
        generated = set_correlation_id()
        assert generated
        assert get_correlation_id() == generated

    def test_set_keeps_given_value(self) -> None:
        assert set_correlation_id("req-42") == "req-42"
        assert get_correlation_id() == "req-42"

    def test_filter_injects_placeholder_outside_request(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"


class TestSafeLogValue:
    def test_collections_are_summarized(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_ids_enums_and_dates_are_rendered(self) -> None:
        session_id = UUID("3f0c9a4e-1b7d-4c2e-9d7a-5e8f6a1b2c3d")

        assert safe_log_value(session_id) == "3f0c9a4e-1b7d-4c2e-9d7a-5e8f6a1b2c3d"
        assert safe_log_value(DecisionStatus.VALIDE) == "valide"
        assert safe_log_value(datetime(2025, 3, 14, 9, 30)) == "2025-03-14T09:30:00"

    def test_long_values_are_truncated(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)
        assert value == "xxxxx... (truncated, 20 total)"


class TestConfigureLogging:
    def test_records_carry_correlation_id(self) -> None:
        stream = io.StringIO()
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            configure_logging("INFO", stream=stream)
            set_correlation_id("req-7")

            log_with_context(logging.getLogger("collabdoc.test"), logging.INFO, "Vote recorded", option="o1")

            output = stream.getvalue()
            assert "collabdoc.test - INFO - [req-7] Vote recorded" in output
        finally:
            root.handlers[:] = previous_handlers
            root.setLevel(previous_level)
