"""Request logging and correlation ids for the radar API.

Each request gets a correlation id: the incoming X-Correlation-ID header
when present, otherwise a fresh UUID. The id is stored in the context so
service loggers pick it up, and it is echoed on the response.

Requests are logged on entry and exit; responses of 400 and above are
logged at warning level.

Usage:
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from tech_radar.api.middleware.request_timeout import TIMEOUT_HEADER
from tech_radar.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    set_correlation_id,
)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Correlation id propagation and per-request logging."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        log = structlog.get_logger().bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
            request_timeout=request.headers.get(TIMEOUT_HEADER),
        )
        log.info("request_started")
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=_elapsed_ms(started),
                error_type=type(exc).__name__,
            )
            raise

        if response.status_code >= 400:
            log.warning(
                "request_completed_with_error",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
        else:
            log.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(started),
            )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
