"""
Exception hierarchy for the order alerts service.

Failures are split by how far they are allowed to travel:
- RequestFailed surfaces to the immediate caller of the REST client
- OperationCancelled always terminates the run
"""

from enum import Enum


class RequestKind(str, Enum):
    """HTTP call shape that produced a failure."""

    GET = "GET"
    POST = "POST"


class OrderAlertsError(Exception):
    """
    Base exception for all order alerts errors.

    Example:
        >>> try:
        ...     await orchestrator.run(token)
        ... except OrderAlertsError as e:
        ...     logger.error(f"Order alerts error: {e}")
    """

    pass


class RequestFailed(OrderAlertsError):
    """
    Raised when a remote API answers with a non-2xx status code.

    Attributes:
        kind: GET or POST
        url: Requested URL
        status_code: HTTP status code returned by the server

    Example:
        >>> raise RequestFailed(RequestKind.POST, "http://example.com/update", 500)
        Traceback (most recent call last):
        ...
        RequestFailed: Failed POST to http://example.com/update (status 500)
    """

    def __init__(self, kind: RequestKind, url: str, status_code: int) -> None:
        self.kind = kind
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed {kind.value} to {url} (status {status_code})")


class OperationCancelled(OrderAlertsError):
    """
    Raised when cooperative cancellation is observed mid-run.

    Never absorbed by the per-order failure boundary.
    """

    def __init__(self, message: str = "Operation was cancelled") -> None:
        super().__init__(message)


__all__ = [
    "OperationCancelled",
    "OrderAlertsError",
    "RequestFailed",
    "RequestKind",
]
