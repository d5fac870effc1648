"""Tests for JSON log formatter.

Tests verify that logs are formatted correctly with:
- Required schema fields (timestamp, level, service, run_id, message)
- order_id only when an order is being processed
- Context from an explicit dict or from extra fields
- Exception information and source location
"""

import json
import logging
import sys
from datetime import UTC, datetime

import pytest

from libs.common.logging.formatter import JSONFormatter


def _record(msg: str = "Test", level: int = logging.INFO, **attrs: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="/path/to/orchestrator.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    @pytest.fixture()
    def formatter(self) -> JSONFormatter:
        return JSONFormatter(service_name="order_alerts")

    def test_basic_log_format(self, formatter: JSONFormatter) -> None:
        """Required fields are present and populated."""
        log_dict = json.loads(formatter.format(_record("Fetched 1 orders from API.", run_id="run-1")))

        assert "timestamp" in log_dict
        assert log_dict["level"] == "INFO"
        assert log_dict["service"] == "order_alerts"
        assert log_dict["run_id"] == "run-1"
        assert log_dict["message"] == "Fetched 1 orders from API."

    def test_timestamp_is_iso8601_utc(self, formatter: JSONFormatter) -> None:
        timestamp = json.loads(formatter.format(_record()))["timestamp"]

        assert timestamp.endswith("Z")
        dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        assert dt.tzinfo == UTC

    def test_run_id_none_outside_run(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record()))

        assert log_dict["run_id"] is None

    def test_order_id_included_when_set(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record(order_id="12345")))

        assert log_dict["order_id"] == "12345"
        # Correlation fields are top-level, never duplicated into context
        assert "context" not in log_dict

    def test_order_id_omitted_when_none(self, formatter: JSONFormatter) -> None:
        log_dict = json.loads(formatter.format(_record(order_id=None)))

        assert "order_id" not in log_dict

    def test_explicit_context_dict(self, formatter: JSONFormatter) -> None:
        record = _record(context={"url": "http://example.com/update", "status_code": 500})

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"] == {"url": "http://example.com/update", "status_code": 500}

    def test_extra_fields_as_context(self, formatter: JSONFormatter) -> None:
        """Fields passed via extra={...} end up in context."""
        record = _record(description="Item 1", num_orders=3)

        log_dict = json.loads(formatter.format(record))

        assert log_dict["context"]["description"] == "Item 1"
        assert log_dict["context"]["num_orders"] == 3

    def test_no_context_when_disabled(self) -> None:
        formatter = JSONFormatter(service_name="test", include_context=False)

        log_dict = json.loads(formatter.format(_record(description="Item 1")))

        assert "context" not in log_dict

    def test_message_attribute_not_copied_into_context(self, formatter: JSONFormatter) -> None:
        """A record already formatted by another handler carries record.message."""
        record = _record()
        logging.Formatter().format(record)

        log_dict = json.loads(formatter.format(record))

        assert "context" not in log_dict

    def test_exception_logging(self, formatter: JSONFormatter) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        record = _record("Failed to process order: OrderId 12345.", level=logging.ERROR)
        record.exc_info = exc_info

        log_dict = json.loads(formatter.format(record))

        assert log_dict["exception"]["type"] == "ValueError"
        assert log_dict["exception"]["message"] == "Test error"
        assert "ValueError" in log_dict["exception"]["traceback"]

    def test_source_location(self, formatter: JSONFormatter) -> None:
        record = _record()
        record.funcName = "submit_update"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["source"] == {
            "file": "/path/to/orchestrator.py",
            "line": 42,
            "function": "submit_update",
        }

    def test_message_with_args(self, formatter: JSONFormatter) -> None:
        record = _record("Fetched %d orders from %s")
        record.args = (2, "orders API")

        log_dict = json.loads(formatter.format(record))

        assert log_dict["message"] == "Fetched 2 orders from orders API"

    def test_non_serializable_context_uses_str(self, formatter: JSONFormatter) -> None:
        started = datetime(2025, 1, 1, tzinfo=UTC)

        log_dict = json.loads(formatter.format(_record(started_at=started)))

        assert log_dict["context"]["started_at"] == str(started)
