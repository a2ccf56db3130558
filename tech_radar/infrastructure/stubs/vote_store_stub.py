"""In-memory vote store.

Keeps votes in insertion order and an index of their unique keys. The
index is checked and updated under one asyncio.Lock, which gives the same
all-or-nothing batch insert a unique constraint gives in a database. When
built on a VotingEventStoreStub the two stores share one lock, and a
checked insert validates the event under it. Not suitable for production
use.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    DuplicateVoteError,
    EventNotFoundError,
    VoteNotFoundError,
)
from tech_radar.domain.models.vote import Vote
from tech_radar.infrastructure.stubs.voting_event_store_stub import (
    VotingEventStoreStub,
)


class VoteStoreStub(VoteStoreProtocol):
    """In-memory implementation of VoteStoreProtocol.

    Attributes:
        _votes: Votes keyed by id, in insertion order.
        _unique_keys: Keys of every stored vote.
        _events: Event store read by checked inserts, if any.
    """

    def __init__(self, events: VotingEventStoreStub | None = None) -> None:
        self._votes: dict[str, Vote] = {}
        self._unique_keys: set[tuple[str, int, str, str]] = set()
        self._events = events
        self._lock = events.lock if events is not None else asyncio.Lock()

    async def insert_many(self, votes: list[Vote], check_event: bool = False) -> None:
        async with self._lock:
            if check_event and votes:
                self._check_event(votes)
            batch_keys: set[tuple[str, int, str, str]] = set()
            for vote in votes:
                key = vote.unique_key
                if key in self._unique_keys or key in batch_keys:
                    raise DuplicateVoteError(*key)
                batch_keys.add(key)
            for vote in votes:
                self._votes[vote.id] = vote
            self._unique_keys |= batch_keys

    def _check_event(self, votes: list[Vote]) -> None:
        if self._events is None:
            raise RuntimeError("Checked vote insert needs a voting event store")
        event_id = votes[0].event_id
        event = self._events.peek(event_id)
        if event is None or event.cancelled:
            raise EventNotFoundError(event_id)
        event.check_ballot(votes)

    async def get(self, vote_id: str) -> Vote | None:
        return self._votes.get(vote_id)

    async def find(
        self,
        event_id: str | None = None,
        technology_id: str | None = None,
        event_round: int | None = None,
    ) -> list[Vote]:
        return [
            v
            for v in self._votes.values()
            if (event_id is None or v.event_id == event_id)
            and (technology_id is None or v.technology.id == technology_id)
            and (event_round is None or v.event_round == event_round)
        ]

    async def update_cas(self, vote: Vote, expected_version: int) -> Vote:
        async with self._lock:
            current = self._votes.get(vote.id)
            if current is None:
                raise VoteNotFoundError(vote.id)
            if current.version != expected_version:
                raise ConcurrentModificationError(
                    vote.id, expected_version, operation="update_vote"
                )
            stored = replace(vote, version=expected_version + 1)
            self._votes[vote.id] = stored
            return stored

    async def delete_by_event(self, event_id: str) -> int:
        async with self._lock:
            doomed = [v for v in self._votes.values() if v.event_id == event_id]
            for vote in doomed:
                del self._votes[vote.id]
                self._unique_keys.discard(vote.unique_key)
            return len(doomed)

    def clear(self) -> None:
        """Remove every vote (test helper)."""
        self._votes.clear()
        self._unique_keys.clear()
