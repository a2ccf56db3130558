"""Correlation id propagation.

The id lives in a context variable so it follows a request across await
points. The HTTP middleware sets it; services bind it into their loggers
and the structlog processor below stamps it on every entry.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

CORRELATION_HEADER = "X-Correlation-ID"

_correlation_id: ContextVar[str] = ContextVar("radar_correlation_id", default="")


def get_correlation_id() -> str:
    """Current correlation id, or an empty string outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation id for the current context.

    Args:
        correlation_id: Incoming id; a new UUID4 is generated when empty.

    Returns:
        The id now in effect.
    """
    value = correlation_id or str(uuid4())
    _correlation_id.set(value)
    return value


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the correlation id when one is set."""
    correlation_id = _correlation_id.get()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
