"""Logging configuration for batch services.

Sets up structured JSON output on stdout with the run and order correlation
IDs injected into every record. Services call configure_logging() once at
startup and use logging.getLogger(__name__) everywhere else.

Example:
    >>> from libs.common.logging.config import configure_logging
    >>> logger = configure_logging(service_name="order_alerts", log_level="INFO")
    >>> logger.info("Service started", extra={"context": {"version": "0.1.0"}})
"""

import logging
import sys

from libs.common.logging.context import get_order_id, get_run_id
from libs.common.logging.formatter import JSONFormatter


class RunContextFilter(logging.Filter):
    """Logging filter that adds the current run ID and order ID to records.

    Example:
        >>> from libs.common.logging.context import LogContext
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(RunContextFilter())
        >>> with LogContext("run-1"):
        ...     logging.getLogger().info("tagged")  # record.run_id == "run-1"
    """

    def filter(self, record: logging.LogRecord) -> bool:
        # Explicit extra={"order_id": ...} wins over the ambient context
        if getattr(record, "run_id", None) is None:
            record.run_id = get_run_id()
        if getattr(record, "order_id", None) is None:
            record.order_id = get_order_id()
        return True


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
) -> logging.Logger:
    """Configure structured JSON logging on the root logger.

    Args:
        service_name: Name of the service (e.g., "order_alerts")
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to include context dict in output

    Returns:
        Configured root logger instance

    Raises:
        ValueError: If log_level is invalid
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        JSONFormatter(
            service_name=service_name,
            include_context=include_context,
        )
    )
    handler.addFilter(RunContextFilter())

    root_logger.addHandler(handler)

    return root_logger

