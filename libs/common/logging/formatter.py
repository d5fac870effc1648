"""JSON log formatter for structured logging.

Example log output:
    {
        "timestamp": "2025-10-21T10:30:00.000Z",
        "level": "ERROR",
        "service": "order_alerts",
        "run_id": "abc123-def456",
        "order_id": "12345",
        "message": "Failed POST to http://example.com/update with status code 500",
        "context": {"url": "http://example.com/update", "status_code": 500}
    }
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

# LogRecord attributes that are never copied into "context"
_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "message",
        "asctime",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "run_id",
        "order_id",
        "context",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log record.

    Attributes:
        service_name: Name of the service emitting logs
        include_context: Whether to include extra context fields

    Example:
        >>> formatter = JSONFormatter(service_name="order_alerts")
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
        >>> logger = logging.getLogger(__name__)
        >>> logger.addHandler(handler)
        >>> logger.info("Fetched orders", extra={"num_orders": 3})
    """

    def __init__(
        self, service_name: str, include_context: bool = True, *args: Any, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "run_id": getattr(record, "run_id", None),
            "message": record.getMessage(),
        }

        order_id = getattr(record, "order_id", None)
        if order_id is not None:
            log_entry["order_id"] = order_id

        if self.include_context:
            context = self._extract_context(record)
            if context:
                log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self._format_exception(record.exc_info),
            }

        log_entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """Format a LogRecord timestamp as ISO 8601 UTC with millisecond precision.

        Example:
            >>> JSONFormatter(service_name="test")._format_timestamp(1697884200.0)
            '2023-10-21T10:30:00.000Z'
        """
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        """Collect context from an explicit "context" dict or from extra fields."""
        context = getattr(record, "context", None)
        if context and isinstance(context, dict):
            return dict(context)

        extra = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS
        }
        return extra if extra else None

    def _format_exception(
        self,
        exc_info: tuple[type[BaseException] | None, BaseException | None, TracebackType | None],
    ) -> str:
        return "".join(traceback.format_exception(*exc_info))
