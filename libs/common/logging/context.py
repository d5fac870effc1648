"""Run and order correlation context for structured logging.

Every batch run gets a run ID (UUIDv4) that is attached to all of its log
records and propagated to remote APIs in the X-Correlation-ID header. While an
order is being processed, its order ID is attached as well so a single order's
alert, update and failure logs can be grouped together.

Example:
    >>> from libs.common.logging.context import LogContext, get_run_id
    >>> with LogContext("run-123"):
    ...     get_run_id()
    'run-123'
"""

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from types import TracebackType

# Context variables are task-local under asyncio
_run_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("run_id", default=None)
_order_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "order_id", default=None
)

# HTTP header name for run ID propagation
CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_run_id() -> str:
    """Generate a new unique run ID.

    Returns:
        A unique run ID string (UUID v4 format)

    Example:
        >>> len(generate_run_id())
        36
    """
    return str(uuid.uuid4())


def get_run_id() -> str | None:
    """Get the current run ID from context, or None if no run is active."""
    return _run_id_var.get()


def set_run_id(run_id: str) -> None:
    """Set the run ID for the current context.

    Args:
        run_id: The run ID to set

    Raises:
        ValueError: If run_id is empty or None
    """
    if not run_id:
        raise ValueError("Run ID cannot be empty")
    _run_id_var.set(run_id)


def clear_run_id() -> None:
    """Clear the run ID from the current context."""
    _run_id_var.set(None)


def get_order_id() -> str | None:
    """Get the ID of the order currently being processed, if any."""
    return _order_id_var.get()


@contextmanager
def order_context(order_id: str) -> Iterator[str]:
    """Attach an order ID to all log records emitted inside the block.

    Example:
        >>> with order_context("12345"):
        ...     get_order_id()
        '12345'
        >>> get_order_id() is None
        True
    """
    token = _order_id_var.set(order_id)
    try:
        yield order_id
    finally:
        _order_id_var.reset(token)


class LogContext:
    """Context manager for scoped run ID management.

    Sets a run ID for a block of code and restores the previous value when
    done. Generates a new ID when none is given.

    Example:
        >>> with LogContext() as run_id:
        ...     get_run_id() == run_id
        True
    """

    def __init__(self, run_id: str | None = None) -> None:
        self.run_id = run_id or generate_run_id()
        self.previous_run_id: str | None = None

    def __enter__(self) -> str:
        self.previous_run_id = get_run_id()
        set_run_id(self.run_id)
        return self.run_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.previous_run_id is not None:
            set_run_id(self.previous_run_id)
        else:
            clear_run_id()
