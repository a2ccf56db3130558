"""Observability: structured logging and correlation ids."""

from tech_radar.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    correlation_id_processor,
    get_correlation_id,
    set_correlation_id,
)
from tech_radar.infrastructure.observability.logging import configure_structlog

__all__ = [
    "CORRELATION_HEADER",
    "configure_structlog",
    "correlation_id_processor",
    "get_correlation_id",
    "set_correlation_id",
]
