"""
Order alerts batch runner.

Runs the order alert pipeline once per process invocation.

Usage:
    $ python -m apps.order_alerts.main
    $ python -m apps.order_alerts.main --orders-url http://orders/api/orders --log-level DEBUG
    $ order-alerts --timeout 10

Environment Variables:
    ORDERS_API_URL: Orders API endpoint (GET)
    ALERT_API_URL: Alert API endpoint (POST)
    UPDATE_API_URL: Update API endpoint (POST)
    REQUEST_TIMEOUT_SECONDS: HTTP timeout (default: 30)
    LOG_LEVEL: Logging level (default: INFO)

Exit Codes:
    0: Run completed (individual order failures are logged, not fatal)
    1: Run cancelled (SIGINT/SIGTERM) or unhandled error
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Any

import httpx

from apps.order_alerts import __version__
from apps.order_alerts.cancellation import CancellationToken
from apps.order_alerts.clients import RestClient
from apps.order_alerts.config import Settings
from apps.order_alerts.exceptions import OperationCancelled
from apps.order_alerts.orchestrator import OrderAlertOrchestrator
from apps.order_alerts.schemas import RunSummary
from libs.common.logging import configure_logging

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    All arguments are optional; CLI values override environment variables and
    the .env file, which override the built-in defaults.
    """
    parser = argparse.ArgumentParser(
        description="Send delivery alerts for delivered order items and post updated orders",
    )

    parser.add_argument(
        "--orders-url",
        type=str,
        default=None,
        help="Orders API URL (default: from ORDERS_API_URL env var)",
    )
    parser.add_argument(
        "--alert-url",
        type=str,
        default=None,
        help="Alert API URL (default: from ALERT_API_URL env var)",
    )
    parser.add_argument(
        "--update-url",
        type=str,
        default=None,
        help="Update API URL (default: from UPDATE_API_URL env var)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP request timeout in seconds (default: from REQUEST_TIMEOUT_SECONDS env var)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: from LOG_LEVEL env var)",
    )

    return parser.parse_args(argv)


def load_configuration(args: argparse.Namespace) -> Settings:
    """Build Settings with CLI arguments taking priority over the environment."""
    overrides: dict[str, Any] = {
        "orders_api_url": args.orders_url,
        "alert_api_url": args.alert_url,
        "update_api_url": args.update_url,
        "request_timeout_seconds": args.timeout,
        "log_level": args.log_level,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


async def run_once(
    settings: Settings,
    token: CancellationToken,
    http_client: httpx.AsyncClient | None = None,
) -> RunSummary:
    """
    Execute a single pipeline run and always release the HTTP client.

    Args:
        settings: Loaded settings
        token: Cancellation token
        http_client: Optional preconfigured httpx.AsyncClient

    Raises:
        OperationCancelled: If the run was cancelled
    """
    async with RestClient(timeout=settings.request_timeout_seconds, client=http_client) as rest:
        orchestrator = OrderAlertOrchestrator(settings.urls(), rest)
        return await orchestrator.run(token)


def install_signal_handlers(token: CancellationToken) -> list[signal.Signals]:
    """
    Cancel the token on SIGINT/SIGTERM.

    Returns:
        Signals whose handler was installed (empty where the loop does not support it)
    """
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, token.cancel)
        except (NotImplementedError, RuntimeError):
            continue
        installed.append(sig)
    return installed


def remove_signal_handlers(signals: list[signal.Signals]) -> None:
    """Restore the default handlers for signals set by install_signal_handlers."""
    loop = asyncio.get_running_loop()
    for sig in signals:
        loop.remove_signal_handler(sig)


async def _run(settings: Settings) -> int:
    token = CancellationToken()
    installed = install_signal_handlers(token)

    try:
        summary = await run_once(settings, token)
    except OperationCancelled as e:
        logger.error(f"The application was cancelled: {e}")
        return EXIT_FAILURE
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return EXIT_FAILURE
    finally:
        remove_signal_handlers(installed)

    logger.info(
        f"Run {summary.run_id} finished: {summary.num_succeeded}/{summary.num_orders} orders updated",
        extra={"num_failed": summary.num_failed},
    )
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the order alerts batch run.

    Returns:
        Exit code (0 on completion, 1 on cancellation or error)

    Example:
        >>> sys.exit(main())
    """
    args = parse_arguments(argv)

    try:
        settings = load_configuration(args)
        configure_logging(service_name=settings.service_name, log_level=settings.log_level)
    except ValueError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info(f"Starting Order Alerts (version={__version__})")
    logger.info(f"Orders API: {settings.orders_api_url}")
    logger.info(f"Alert API: {settings.alert_api_url}")
    logger.info(f"Update API: {settings.update_api_url}")

    return asyncio.run(_run(settings))


if __name__ == "__main__":
    sys.exit(main())
