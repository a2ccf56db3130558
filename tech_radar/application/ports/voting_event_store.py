"""Voting event store port.

Every mutation of an event goes through update_cas: the service reads the
event, computes the new state in the domain model and writes it back only
if the stored version is still the one it read. Two racing operations on
the same event therefore cannot both apply.
"""

from __future__ import annotations

from typing import Protocol

from tech_radar.domain.models.voting_event import VotingEvent


class VotingEventStoreProtocol(Protocol):
    """Protocol for voting event persistence.

    Methods:
        insert: Store a new event
        get: Fetch an event by id, cancelled or not
        list_all: Fetch events, lightweight unless full
        update_cas: Replace an event if its version is unchanged
        delete: Remove an event document
    """

    async def insert(self, event: VotingEvent) -> VotingEvent:
        """Store a new event.

        Raises:
            DuplicateEventNameError: If a non-cancelled event already has
                the same name.
        """
        ...

    async def get(self, event_id: str) -> VotingEvent | None:
        """Fetch an event by id, including soft-cancelled ones."""
        ...

    async def list_all(
        self,
        full: bool = False,
        include_cancelled: bool = False,
    ) -> list[VotingEvent]:
        """List events in creation order.

        Args:
            full: When False, technologies and blips are left empty.
            include_cancelled: Whether soft-cancelled events are listed.
        """
        ...

    async def update_cas(
        self, event: VotingEvent, expected_version: int
    ) -> VotingEvent:
        """Store a modified event if nobody changed it since it was read.

        Args:
            event: The modified event.
            expected_version: Version the event had when it was read.

        Returns:
            The stored event, with its version incremented.

        Raises:
            EventNotFoundError: If the event no longer exists.
            ConcurrentModificationError: If the stored version differs.
            DuplicateEventNameError: If the update would leave two
                non-cancelled events with the same name.
        """
        ...

    async def delete(self, event_id: str) -> bool:
        """Delete an event document.

        Returns:
            True if an event was deleted.
        """
        ...
