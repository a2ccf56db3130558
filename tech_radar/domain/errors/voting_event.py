"""Voting event errors.

Raised by the voting event service when an event or one of its
technologies does not satisfy the precondition of an operation.
"""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class DuplicateEventNameError(RadarError):
    """Raised when a non-cancelled event with the same name exists.

    Attributes:
        name: The rejected event name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A voting event named '{name}' already exists")


class EventNotFoundError(RadarError):
    """Raised when an event id does not resolve to a visible event.

    Soft-cancelled events are reported as not found by read operations.

    Attributes:
        event_id: The id that was looked up.
    """

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Voting event not found: {event_id}")


class VotingEventNotOpenError(RadarError):
    """Raised when an operation needs an open event.

    Attributes:
        event_id: Voting event id.
        status: The event's effective status.
        operation: Name of the rejected operation.
    """

    def __init__(self, event_id: str, status: str, operation: str) -> None:
        self.event_id = event_id
        self.status = status
        self.operation = operation
        super().__init__(
            f"Voting event {event_id} is {status}; {operation} requires an open event"
        )


class TechnologyNotPresentError(RadarError):
    """Raised when a technology is not part of the event.

    Attributes:
        event_id: Voting event id.
        technology: The technology id or name that was looked up.
    """

    def __init__(self, event_id: str, technology: str) -> None:
        self.event_id = event_id
        self.technology = technology
        super().__init__(
            f"Technology {technology} is not present in voting event {event_id}"
        )


class TechnologyAlreadyPresentError(RadarError):
    """Raised when adding a technology whose name the event already has.

    Attributes:
        event_id: Voting event id.
        technology_name: The duplicate name.
    """

    def __init__(self, event_id: str, technology_name: str) -> None:
        self.event_id = event_id
        self.technology_name = technology_name
        super().__init__(
            f"Technology '{technology_name}' is already present in "
            f"voting event {event_id}"
        )


class TechnologyNotEligibleError(RadarError):
    """Raised when a technology is not up for voting in the current round.

    After the first round only technologies flagged for revote (or never
    tallied) accept votes.

    Attributes:
        event_id: Voting event id.
        technology_id: The technology voted on.
        round: The event's current round.
    """

    def __init__(self, event_id: str, technology_id: str, round: int) -> None:
        self.event_id = event_id
        self.technology_id = technology_id
        self.round = round
        super().__init__(
            f"Technology {technology_id} is not open for voting in round {round} "
            f"of voting event {event_id}"
        )


class InitiativeNotFoundError(RadarError):
    """Raised when an event names an initiative the catalog does not know.

    Attributes:
        initiative_name: The name that was looked up.
    """

    def __init__(self, initiative_name: str) -> None:
        self.initiative_name = initiative_name
        super().__init__(f"Initiative not found: {initiative_name}")
