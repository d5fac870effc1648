"""Delivery alert notifier.

Alerts are best-effort: a failed alert is logged and reported as an
unsuccessful NotificationResult, and order processing carries on.
"""

import logging

from apps.order_alerts.cancellation import CancellationToken
from apps.order_alerts.clients import RestClient
from apps.order_alerts.schemas import AlertData, NotificationResult, OrderItem

logger = logging.getLogger(__name__)


class AlertNotifier:
    """Posts a delivery alert for an order item to the alert API."""

    def __init__(self, rest_client: RestClient, alert_api_url: str):
        """
        Initialize Alert Notifier.

        Args:
            rest_client: REST client shared with the pipeline
            alert_api_url: POST endpoint receiving delivery alerts
        """
        self.rest_client = rest_client
        self.alert_api_url = alert_api_url

    async def notify(
        self, item: OrderItem, order_id: str, token: CancellationToken
    ) -> NotificationResult:
        """
        Send the delivery alert for one item.

        Never raises for API or transport failures; the outcome is returned.

        Args:
            item: Delivered order item
            order_id: ID of the order owning the item
            token: Cancellation token

        Returns:
            NotificationResult with success=False and the error on failure
        """
        alert = AlertData.for_delivered_item(item, order_id)

        try:
            await self.rest_client.post_without_response(self.alert_api_url, alert, token)
        except Exception as exc:
            logger.error(
                f"Failed to send alert for delivered item: {item.description}",
                exc_info=True,
                extra={"description": item.description, "error": str(exc)},
            )
            return NotificationResult(
                order_id=order_id, description=item.description, success=False, error=str(exc)
            )

        if token.cancelled:
            logger.warning(
                f"Alert for delivered item was cancelled: {item.description}",
                extra={"description": item.description},
            )
            return NotificationResult(
                order_id=order_id, description=item.description, success=False, error="cancelled"
            )

        logger.info(
            f"Alert sent for delivered item: {item.description}",
            extra={"description": item.description},
        )
        return NotificationResult(order_id=order_id, description=item.description, success=True)


__all__ = ["AlertNotifier"]
