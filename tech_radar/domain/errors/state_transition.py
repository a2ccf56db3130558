"""State transition errors for the voting event state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tech_radar.domain.exceptions import RadarError

if TYPE_CHECKING:
    from tech_radar.domain.models.voting_event import VotingEventStatus


class InvalidStateTransitionError(RadarError):
    """Raised when a status change is not in the transition matrix.

    Attributes:
        from_state: Current status of the event.
        to_state: Attempted target status.
        allowed_transitions: Valid target statuses from the current one.
    """

    def __init__(
        self,
        from_state: VotingEventStatus,
        to_state: VotingEventStatus,
        allowed_transitions: list[VotingEventStatus] | None = None,
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.allowed_transitions = allowed_transitions or []

        allowed_str = (
            f" Valid transitions: {sorted(s.value for s in self.allowed_transitions)}"
            if self.allowed_transitions
            else ""
        )
        super().__init__(
            f"Invalid state transition: {from_state.value} -> {to_state.value}."
            f"{allowed_str}"
        )
