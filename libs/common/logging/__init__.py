"""Structured logging library.

Provides JSON logging with run and order correlation IDs for batch services.

Usage:
    # At process startup
    from libs.common.logging import configure_logging
    configure_logging(service_name="order_alerts", log_level="INFO")

    # Around one batch run and one order
    from libs.common.logging import LogContext, order_context
    with LogContext() as run_id:
        with order_context("12345"):
            logger.info("Processing order")
"""

from libs.common.logging.config import (
    RunContextFilter,
    configure_logging,
)
from libs.common.logging.context import (
    CORRELATION_ID_HEADER,
    LogContext,
    clear_run_id,
    generate_run_id,
    get_order_id,
    get_run_id,
    order_context,
    set_run_id,
)
from libs.common.logging.formatter import JSONFormatter
from libs.common.logging.http_client import TracedHTTPXClient, get_traced_client

__all__ = [
    # Configuration
    "configure_logging",
    "RunContextFilter",
    # Run / order context
    "generate_run_id",
    "get_run_id",
    "set_run_id",
    "clear_run_id",
    "get_order_id",
    "order_context",
    "LogContext",
    "CORRELATION_ID_HEADER",
    # HTTP
    "TracedHTTPXClient",
    "get_traced_client",
    # Formatter (for advanced usage)
    "JSONFormatter",
]
