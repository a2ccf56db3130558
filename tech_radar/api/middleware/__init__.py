"""HTTP middleware for Tech Radar."""

from tech_radar.api.middleware.logging_middleware import LoggingMiddleware
from tech_radar.api.middleware.request_timeout import RequestTimeoutMiddleware

__all__: list[str] = ["LoggingMiddleware", "RequestTimeoutMiddleware"]
