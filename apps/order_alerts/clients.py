"""
HTTP client for the orders, alert and update APIs.

Provides three call shapes over a single failure taxonomy:
- get: GET and decode the response body
- post: POST a JSON body and decode the (possibly empty) response body
- post_without_response: POST a JSON body when no response body is expected

Non-2xx responses raise RequestFailed. Cooperative cancellation aborts the
in-flight request and is reported as a None result instead of an exception.
"""

import asyncio
import contextlib
import logging
from types import TracebackType
from typing import Any, Optional, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic_core import to_json

from apps.order_alerts.cancellation import CancellationToken
from apps.order_alerts.exceptions import OperationCancelled, RequestFailed, RequestKind
from libs.common.logging.http_client import get_traced_client

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

JSON_HEADERS = {"Content-Type": "application/json"}


def encode_json_body(body: Any) -> bytes:
    """Serialize a request body to JSON bytes, using field aliases for models."""
    return to_json(body, by_alias=True)


class RestClient:
    """
    Generic REST client used by the pipeline and the alert notifier.

    Example:
        >>> async with RestClient(timeout=10.0) as rest:
        ...     orders = await rest.get(urls.orders_api, list[Order], token)
        ...     await rest.post_without_response(urls.update_api, orders[0], token)
    """

    def __init__(self, timeout: float = 30.0, client: httpx.AsyncClient | None = None):
        """
        Initialize REST client.

        Args:
            timeout: Request timeout in seconds (default: 30.0)
            client: Optional preconfigured httpx.AsyncClient (e.g. with a mock transport)
        """
        self.timeout = timeout
        self.client = client if client is not None else get_traced_client(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def get(
        self, url: str, response_type: type[_T], token: CancellationToken
    ) -> _T | None:
        """
        HTTP GET and decode the body as response_type.

        Args:
            url: Request URL
            response_type: Type to decode into (e.g. list[Order])
            token: Cancellation token

        Returns:
            Decoded body, or None if the body is empty or the call was cancelled

        Raises:
            RequestFailed: If the server answers with a non-2xx status
            httpx.HTTPError: On transport failure (logged as critical)
            pydantic.ValidationError: If the body does not match response_type
        """
        response = await self._execute(RequestKind.GET, url, token)
        if response is None or not response.content:
            return None
        # A literal JSON null body decodes to None as well
        return self._decode(RequestKind.GET, url, response, Optional[response_type])

    async def post(
        self, url: str, body: Any, response_type: type[_T], token: CancellationToken
    ) -> _T | None:
        """
        HTTP POST a JSON body and decode the response as response_type.

        A 2xx response without content (201, 204, ...) yields a
        default-constructed response_type().

        Returns:
            Decoded or default response, or None if the call was cancelled

        Raises:
            RequestFailed: If the server answers with a non-2xx status
        """
        response = await self._execute(
            RequestKind.POST, url, token, content=encode_json_body(body), headers=JSON_HEADERS
        )
        if response is None:
            return None
        if not response.content:
            return response_type()
        return self._decode(RequestKind.POST, url, response, response_type)

    async def post_without_response(self, url: str, body: Any, token: CancellationToken) -> None:
        """
        HTTP POST a JSON body when no response body is expected.

        Returns normally on success and on cancellation.

        Raises:
            RequestFailed: If the server answers with a non-2xx status
        """
        await self._execute(
            RequestKind.POST, url, token, content=encode_json_body(body), headers=JSON_HEADERS
        )

    async def _execute(
        self, kind: RequestKind, url: str, token: CancellationToken, **kwargs: Any
    ) -> httpx.Response | None:
        try:
            response = await self._send(kind, url, token, **kwargs)
        except OperationCancelled:
            logger.error(f"{kind.value} request to {url} was cancelled", extra={"url": url})
            return None
        except Exception:
            logger.critical(f"Failed {kind.value} to {url}", exc_info=True, extra={"url": url})
            raise

        if not response.is_success:
            logger.error(
                f"Failed {kind.value} to {url} with status code {response.status_code}",
                extra={"url": url, "status_code": response.status_code},
            )
            raise RequestFailed(kind, url, response.status_code)

        logger.info(
            f"{kind.value} to {url} was successful with status code {response.status_code}",
            extra={"url": url, "status_code": response.status_code},
        )
        return response

    async def _send(
        self, kind: RequestKind, url: str, token: CancellationToken, **kwargs: Any
    ) -> httpx.Response:
        """Race the request against the token; abort the request if the token fires first."""
        token.raise_if_cancelled()

        request = asyncio.ensure_future(self.client.request(kind.value, url, **kwargs))
        cancelled = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({request, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not request.done():
                request.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await request

        if request.cancelled():
            raise OperationCancelled(f"{kind.value} request to {url} was cancelled")
        return request.result()

    def _decode(
        self, kind: RequestKind, url: str, response: httpx.Response, response_type: type[_T]
    ) -> _T:
        try:
            return TypeAdapter(response_type).validate_json(response.content)
        except Exception:
            logger.critical(
                f"Failed to decode {kind.value} response from {url}",
                exc_info=True,
                extra={"url": url, "status_code": response.status_code},
            )
            raise
