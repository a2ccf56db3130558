"""Errors surfaced when a store collaborator misbehaves.

Neither is retried. Both carry the failed operation name; the store
failure keeps the original exception as its ``__cause__``.
"""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class OperationTimeoutError(RadarError):
    """Raised when a store call exceeds the caller's timeout.

    Attributes:
        operation: Name of the store operation.
        timeout_seconds: The timeout that was exceeded.
    """

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Store operation {operation} timed out after {timeout_seconds}s"
        )


class StoreUnavailableError(RadarError):
    """Raised when a store call fails for a reason outside the domain.

    Attributes:
        operation: Name of the store operation.
        reason: Text of the underlying failure.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Store unavailable during {operation}: {reason}")
