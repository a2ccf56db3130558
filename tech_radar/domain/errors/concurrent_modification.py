"""Concurrent modification errors for compare-and-set updates.

Every voting event and vote document carries a version. A write supplies
the version it read; when the stored version moved on in the meantime the
write is rejected with one of these errors instead of overwriting.
"""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class ConcurrentModificationError(RadarError):
    """Raised when a compare-and-set write loses against another writer.

    This is a recoverable error: the caller should re-read the document
    and decide whether to retry or abort.

    Attributes:
        resource_id: Id of the document that was being modified.
        expected_version: Version the writer read before modifying, when
            the conflict was detected on the version.
        operation: Name of the operation that failed.
    """

    def __init__(
        self,
        resource_id: str,
        expected_version: int | None,
        operation: str = "update",
        message: str | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.expected_version = expected_version
        self.operation = operation
        super().__init__(
            message
            or (
                f"Concurrent modification detected for {resource_id} during "
                f"{operation}. Expected version: {expected_version}."
            )
        )


class StaleRoundError(ConcurrentModificationError):
    """Raised when an operation targets a round the event has already left.

    Raised by the loser of two concurrent flow steps on the same round,
    and by vote submissions or revote openings naming an old round.

    Attributes:
        event_id: Voting event id.
        expected_round: Round the caller assumed was current.
        current_round: Round the event is actually in.
    """

    def __init__(
        self,
        event_id: str,
        expected_round: int | None,
        current_round: int | None,
        operation: str = "move_to_next_flow_step",
    ) -> None:
        self.event_id = event_id
        self.expected_round = expected_round
        self.current_round = current_round
        super().__init__(
            resource_id=event_id,
            expected_version=None,
            operation=operation,
            message=(
                f"Stale round for voting event {event_id} during {operation}: "
                f"expected round {expected_round}, event is in round {current_round}."
            ),
        )
