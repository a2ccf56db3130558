"""Per-request store timeout taken from the X-Request-Timeout header.

The header value is a positive number of seconds. It applies to every
store call made while serving the request; without the header the
configured default is used.
"""

import math
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from tech_radar.api.errors import problem
from tech_radar.application.services.request_timeout import request_timeout

TIMEOUT_HEADER = "X-Request-Timeout"

logger = structlog.get_logger()


def parse_timeout(raw: str | None) -> float | None:
    """Parse the header value.

    Raises:
        ValueError: If the value is not a positive number.
    """
    if raw is None or not raw.strip():
        return None
    seconds = float(raw)
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"{TIMEOUT_HEADER} must be positive, got {raw}")
    return seconds


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Applies the caller-supplied timeout for the duration of a request."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        raw = request.headers.get(TIMEOUT_HEADER)
        try:
            seconds = parse_timeout(raw)
        except ValueError:
            logger.info("invalid_request_timeout", value=raw)
            body = problem(
                request,
                400,
                "invalid-request-timeout",
                f"{TIMEOUT_HEADER} must be a positive number of seconds",
                value=raw,
            )
            return JSONResponse(status_code=400, content={"detail": body})

        with request_timeout(seconds):
            return await call_next(request)
