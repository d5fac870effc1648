"""HTTP client with automatic run ID propagation.

Outgoing requests carry the current run ID in the X-Correlation-ID header so
the orders, alert and update APIs can correlate calls from one batch run.

Example:
    >>> from libs.common.logging.http_client import get_traced_client
    >>>
    >>> async with get_traced_client(timeout=5.0) as client:
    ...     response = await client.get("http://api.example.com/orders")
"""

from typing import Any, Optional

import httpx

from libs.common.logging.context import CORRELATION_ID_HEADER, get_run_id


class TracedHTTPXClient(httpx.AsyncClient):
    """httpx.AsyncClient that injects the current run ID into every request."""

    async def request(
        self,
        method: str,
        url: httpx.URL | str,
        **kwargs: Any,
    ) -> httpx.Response:
        run_id = get_run_id()

        if run_id:
            headers = dict(kwargs.get("headers") or {})
            headers[CORRELATION_ID_HEADER] = run_id
            kwargs["headers"] = headers

        return await super().request(method, url, **kwargs)


def get_traced_client(
    base_url: Optional[str] = None,
    timeout: float = 10.0,
    **kwargs: Any,
) -> TracedHTTPXClient:
    """Create a traced async HTTP client.

    Args:
        base_url: Base URL for all requests (optional)
        timeout: Request timeout in seconds
        **kwargs: Additional httpx.AsyncClient parameters (e.g. transport)

    Returns:
        Configured TracedHTTPXClient instance
    """
    client_kwargs: dict[str, Any] = {"timeout": timeout, **kwargs}
    if base_url is not None:
        client_kwargs["base_url"] = base_url

    return TracedHTTPXClient(**client_kwargs)
