"""Vote store port.

Defines the storage contract the vote services rely on. Uniqueness of
(event, round, technology, normalized voter) is enforced here, on insert,
never by a read-then-write check in the service. So is the rule that a
ballot only lands in an open event's current round: a checked insert reads
the event in the same transaction (or under the same lock) as the insert.
"""

from __future__ import annotations

from typing import Protocol

from tech_radar.domain.models.vote import Vote


class VoteStoreProtocol(Protocol):
    """Protocol for vote persistence.

    Methods:
        insert_many: Insert a batch of votes atomically
        get: Fetch one vote by id
        find: Fetch votes filtered by event, technology and round
        update_cas: Replace a vote if its version is unchanged
        delete_by_event: Delete every vote of an event
    """

    async def insert_many(self, votes: list[Vote], check_event: bool = False) -> None:
        """Insert votes as one unit.

        Args:
            votes: Votes to insert, all of the same event.
            check_event: Check the stored event with VotingEvent.check_ballot
                atomically with the insert.

        Raises:
            DuplicateVoteError: If any vote collides with a stored vote or
                with another vote of the batch. Nothing is inserted.
            EventNotFoundError: If checking and the event is missing or
                soft-cancelled.
            VotingEventNotOpenError, StaleRoundError,
            TechnologyNotPresentError, TechnologyNotEligibleError: If
                checking and the event no longer accepts the ballot.
        """
        ...

    async def get(self, vote_id: str) -> Vote | None:
        """Fetch a vote by id, or None."""
        ...

    async def find(
        self,
        event_id: str | None = None,
        technology_id: str | None = None,
        event_round: int | None = None,
    ) -> list[Vote]:
        """Fetch votes matching every given filter, in insertion order."""
        ...

    async def update_cas(self, vote: Vote, expected_version: int) -> Vote:
        """Store a modified vote if nobody changed it since it was read.

        Args:
            vote: The modified vote.
            expected_version: Version the vote had when it was read.

        Returns:
            The stored vote, with its version incremented.

        Raises:
            VoteNotFoundError: If the vote no longer exists.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def delete_by_event(self, event_id: str) -> int:
        """Delete all votes of an event.

        Returns:
            Number of deleted votes.
        """
        ...
