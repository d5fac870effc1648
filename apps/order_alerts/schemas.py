"""
Pydantic schemas for the Order Alerts Service.

Defines models for:
- Orders API payloads (Order, OrderItem)
- Alert API payloads (AlertData)
- Per-call and per-run outcomes
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ==============================================================================
# Orders API Models
# ==============================================================================


class ItemStatus(str, Enum):
    """Delivery status of an order item."""

    UNKNOWN = "Unknown"
    DELIVERED = "Delivered"


# Legacy numeric encoding used by older producers of the orders feed
_LEGACY_STATUS_CODES = {0: ItemStatus.UNKNOWN, 1: ItemStatus.DELIVERED}


class OrderItem(BaseModel):
    """Line item of an order.

    delivery_notification is mutated in place by the pipeline and only exists
    for the outbound update payload.
    """

    model_config = ConfigDict(populate_by_name=True)

    description: str
    status: ItemStatus = ItemStatus.UNKNOWN
    delivery_notification: int = Field(0, ge=0, alias="deliveryNotification")

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_legacy_status(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return _LEGACY_STATUS_CODES[value]
            except KeyError:
                raise ValueError(f"Unknown item status code: {value}") from None
        return value

    @property
    def is_delivered(self) -> bool:
        return self.status == ItemStatus.DELIVERED


class Order(BaseModel):
    """Order as returned by the orders API and posted to the update API."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., min_length=1, alias="orderId")
    items: list[OrderItem] = Field(default_factory=list)


# ==============================================================================
# Alert API Models
# ==============================================================================


class AlertData(BaseModel):
    """Request body for the alert API."""

    message: str

    @classmethod
    def for_delivered_item(cls, item: OrderItem, order_id: str) -> "AlertData":
        """
        Build the alert for a delivered item.

        The count in the message is the value before this pass increments it.

        Example:
            >>> item = OrderItem(description="Item 1", status="Delivered")
            >>> AlertData.for_delivered_item(item, "12345").message
            'Alert for delivered item: Order 12345, Item: Item 1, Delivery Notifications: 0'
        """
        return cls(
            message=(
                f"Alert for delivered item: Order {order_id}, Item: {item.description}, "
                f"Delivery Notifications: {item.delivery_notification}"
            )
        )


# ==============================================================================
# Outcome Models
# ==============================================================================


class NotificationResult(BaseModel):
    """Outcome of one alert notification. Failures are values, never raised."""

    order_id: str
    description: str
    success: bool
    error: str | None = None


class OrderOutcome(BaseModel):
    """Outcome of processing and submitting one order."""

    order_id: str
    success: bool
    delivered_items: int = 0
    error: str | None = None


class RunSummary(BaseModel):
    """Result of one complete order alert run."""

    run_id: str
    started_at: datetime
    completed_at: datetime | None = None
    num_orders: int = 0
    num_succeeded: int = 0
    num_failed: int = 0
    num_delivered_items: int = 0
    outcomes: list[OrderOutcome] = Field(default_factory=list)

    def record(self, outcome: OrderOutcome) -> None:
        """Append an order outcome and update the counters."""
        self.outcomes.append(outcome)
        self.num_delivered_items += outcome.delivered_items
        if outcome.success:
            self.num_succeeded += 1
        else:
            self.num_failed += 1
