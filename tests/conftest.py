"""
Root conftest for tests.

Provides shared fixtures for the order alerts service:
1. Endpoint configuration and a fresh cancellation token
2. Order payloads matching the orders API wire format
3. Reset of the run/order logging context between tests
"""

from collections.abc import Iterator
from typing import Any

import pytest

from apps.order_alerts.cancellation import CancellationToken
from apps.order_alerts.config import UrlConfiguration
from libs.common.logging.context import clear_run_id

ORDERS_URL = "http://orders.local/api/orders"
ALERT_URL = "http://alerts.local/api/alerts"
UPDATE_URL = "http://update.local/api/update"


@pytest.fixture()
def urls() -> UrlConfiguration:
    """Endpoint configuration pointing at fake hosts."""
    return UrlConfiguration(orders_api=ORDERS_URL, alert_api=ALERT_URL, update_api=UPDATE_URL)


@pytest.fixture()
def token() -> CancellationToken:
    """Fresh, uncancelled token."""
    return CancellationToken()


@pytest.fixture()
def order_payload() -> dict[str, Any]:
    """Single order with one delivered item, as sent by the orders API."""
    return {
        "orderId": "12345",
        "items": [{"description": "Item 1", "status": "Delivered", "deliveryNotification": 0}],
    }


@pytest.fixture(autouse=True)
def _reset_run_context() -> Iterator[None]:
    clear_run_id()
    yield
    clear_run_id()
