"""Tests for run ID propagation on outgoing HTTP requests."""

import httpx
import pytest

from libs.common.logging.context import CORRELATION_ID_HEADER, LogContext
from libs.common.logging.http_client import TracedHTTPXClient, get_traced_client


def _recording_transport(seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    return httpx.MockTransport(handler)


class TestTracedHTTPXClient:
    @pytest.mark.asyncio()
    async def test_injects_run_id_header(self) -> None:
        seen: list[httpx.Request] = []

        async with get_traced_client(transport=_recording_transport(seen)) as client:
            with LogContext("run-42"):
                await client.post(
                    "http://alerts.local/alerts", headers={"Content-Type": "application/json"}
                )

        assert seen[0].headers[CORRELATION_ID_HEADER] == "run-42"
        assert seen[0].headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio()
    async def test_no_header_outside_run(self) -> None:
        seen: list[httpx.Request] = []

        async with get_traced_client(transport=_recording_transport(seen)) as client:
            await client.get("http://orders.local/orders")

        assert CORRELATION_ID_HEADER not in seen[0].headers

    def test_factory_applies_options(self) -> None:
        client = get_traced_client(base_url="http://orders.local", timeout=5.0)

        assert isinstance(client, TracedHTTPXClient)
        assert client.base_url == httpx.URL("http://orders.local")
        assert client.timeout == httpx.Timeout(5.0)
