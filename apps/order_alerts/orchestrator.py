"""
Order Alert Orchestrator - core pipeline.

Coordinates one batch run:
1. Fetch orders from the orders API
2. For each order, alert on every delivered item and increment its counter
3. Post the updated order to the update API
4. Report per-order outcomes in a RunSummary

Failure policy per call site:
- notify: failure absorbed inside AlertNotifier (best-effort)
- submit_update: failure logged and re-raised, absorbed at the per-order boundary
- cancellation: never absorbed, terminates the run
"""

import logging
from datetime import UTC, datetime

from pydantic import ValidationError

from apps.order_alerts.alerts import AlertNotifier
from apps.order_alerts.cancellation import CancellationToken
from apps.order_alerts.clients import RestClient
from apps.order_alerts.config import UrlConfiguration
from apps.order_alerts.exceptions import OperationCancelled
from apps.order_alerts.schemas import Order, OrderOutcome, RunSummary
from libs.common.logging.context import LogContext, order_context

logger = logging.getLogger(__name__)


class OrderAlertOrchestrator:
    """
    Runs the fetch → process → alert → update pipeline.

    Stateless across runs; the same instance may be reused.

    Example:
        >>> async with RestClient() as rest:
        ...     orchestrator = OrderAlertOrchestrator(urls, rest)
        ...     summary = await orchestrator.run(CancellationToken())
        >>> summary.num_failed
        0
    """

    def __init__(
        self,
        urls: UrlConfiguration,
        rest_client: RestClient,
        notifier: AlertNotifier | None = None,
    ):
        """
        Initialize Order Alert Orchestrator.

        Args:
            urls: Frozen endpoint configuration
            rest_client: REST client used for the orders and update APIs
            notifier: Alert notifier (default: AlertNotifier on urls.alert_api)
        """
        self.urls = urls
        self.rest_client = rest_client
        self.notifier = notifier or AlertNotifier(rest_client, urls.alert_api)

    async def run(self, token: CancellationToken) -> RunSummary:
        """
        Execute one complete run.

        Every fetched order is attempted; one failing order never aborts the
        batch. Cancellation requested before or during iteration propagates.

        Args:
            token: Cancellation token

        Returns:
            RunSummary with one outcome per attempted order

        Raises:
            OperationCancelled: If cancellation is requested before or during iteration
        """
        with LogContext() as run_id:
            summary = RunSummary(run_id=run_id, started_at=datetime.now(UTC))
            logger.info("Starting order alert run")

            orders = await self.fetch_orders(token)
            summary.num_orders = len(orders)
            token.raise_if_cancelled()

            for order in orders:
                token.raise_if_cancelled()
                with order_context(order.order_id):
                    summary.record(await self._process_isolated(order, token))

            token.raise_if_cancelled()

            summary.completed_at = datetime.now(UTC)
            logger.info(
                "Order alert run completed, results sent to update API",
                extra={
                    "num_orders": summary.num_orders,
                    "num_succeeded": summary.num_succeeded,
                    "num_failed": summary.num_failed,
                    "num_delivered_items": summary.num_delivered_items,
                },
            )
            return summary

    async def fetch_orders(self, token: CancellationToken) -> list[Order]:
        """
        Fetch the orders to process.

        An absent result (empty body or cancelled GET) or an invalid body
        degrades to no orders.

        Raises:
            RequestFailed: If the orders API answers with a non-2xx status
        """
        try:
            orders = await self.rest_client.get(self.urls.orders_api, list[Order], token)
        except ValidationError as exc:
            logger.error(
                "Orders API returned an invalid body, treating it as no orders.",
                extra={"url": self.urls.orders_api, "error_count": exc.error_count()},
            )
            orders = None

        if orders is None:
            logger.error("Failed to fetch orders from API.", extra={"url": self.urls.orders_api})
            orders = []

        logger.info(f"Fetched {len(orders)} orders from API.", extra={"num_orders": len(orders)})
        return orders

    async def process_order(self, order: Order, token: CancellationToken) -> Order:
        """
        Alert on every delivered item and increment its notification count.

        Items are visited in order. Items already updated stay updated when
        cancellation interrupts the loop.

        Returns:
            The same order instance, mutated in place

        Raises:
            OperationCancelled: If cancellation is requested between items
        """
        for item in order.items:
            token.raise_if_cancelled()

            if item.is_delivered:
                await self.notifier.notify(item, order.order_id, token)
                item.delivery_notification += 1

        return order

    async def submit_update(self, order: Order, token: CancellationToken) -> None:
        """
        Post the updated order to the update API.

        Raises:
            Exception: Any failure, after logging it with the order id
            OperationCancelled: If cancellation was requested while posting
        """
        try:
            await self.rest_client.post_without_response(self.urls.update_api, order, token)
        except Exception:
            logger.error(
                f"Failed to send updated order for processing: OrderId {order.order_id}.",
                exc_info=True,
                extra={"order_id": order.order_id},
            )
            raise

        # A cancelled POST returns normally without sending anything
        token.raise_if_cancelled()

        logger.info(
            f"Updated order sent for processing: OrderId {order.order_id}",
            extra={"order_id": order.order_id},
        )

    async def _process_isolated(self, order: Order, token: CancellationToken) -> OrderOutcome:
        """Failure boundary for one order: errors become a failed outcome, cancellation propagates."""
        try:
            await self.process_order(order, token)
            await self.submit_update(order, token)
        except OperationCancelled:
            raise
        except Exception as exc:
            logger.error(
                f"Failed to process order: OrderId {order.order_id}.",
                exc_info=True,
                extra={"order_id": order.order_id, "error": str(exc)},
            )
            return OrderOutcome(order_id=order.order_id, success=False, error=str(exc))

        delivered = sum(1 for item in order.items if item.is_delivered)
        return OrderOutcome(order_id=order.order_id, success=True, delivered_items=delivered)
