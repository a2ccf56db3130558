"""Caller-supplied timeout for store calls.

The timeout of the current request lives in a context variable so that
every store call made while serving it can read it without threading a
parameter through each service method.

Usage:
    with request_timeout(2.5):
        await service.move_to_next_flow_step(event_id)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_request_timeout: ContextVar[float | None] = ContextVar(
    "radar_request_timeout", default=None
)


def current_timeout(default: float) -> float:
    """Timeout of the current request, or ``default`` when none was set."""
    value = _request_timeout.get()
    return value if value is not None else default


@contextmanager
def request_timeout(seconds: float | None) -> Iterator[None]:
    """Apply a timeout to every store call made inside the block.

    Args:
        seconds: Timeout in seconds; None keeps the configured default.

    Raises:
        ValueError: If seconds is not positive.
    """
    if seconds is not None and seconds <= 0:
        raise ValueError(f"Timeout must be positive, got {seconds}")
    token = _request_timeout.set(seconds)
    try:
        yield
    finally:
        _request_timeout.reset(token)
