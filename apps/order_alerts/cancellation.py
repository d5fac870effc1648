"""Cooperative cancellation handle threaded through every pipeline call."""

import asyncio

from apps.order_alerts.exceptions import OperationCancelled


class CancellationToken:
    """
    Explicit cancellation signal shared by the runner and the pipeline.

    The runner calls cancel() (e.g. from a SIGTERM handler); the pipeline
    checks the token at the top of each order and item iteration, and the REST
    client aborts in-flight requests when it fires.

    Example:
        >>> token = CancellationToken()
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.raise_if_cancelled()
        Traceback (most recent call last):
        ...
        OperationCancelled: Operation was cancelled
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if cancellation was requested."""
        if self._event.is_set():
            raise OperationCancelled()

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()


__all__ = ["CancellationToken"]
