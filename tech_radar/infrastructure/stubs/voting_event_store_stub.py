"""In-memory voting event store.

Stores events in a dict. An asyncio.Lock serializes writes so that the
compare-and-set and the name uniqueness check behave as they would on a
database. A VoteStoreStub built on top of this store shares the lock, so
a checked ballot insert cannot interleave with an event update. Not
suitable for production use.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace

from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    DuplicateEventNameError,
    EventNotFoundError,
)
from tech_radar.domain.models.voting_event import VotingEvent


class VotingEventStoreStub(VotingEventStoreProtocol):
    """In-memory implementation of VotingEventStoreProtocol.

    Attributes:
        _events: Events keyed by id, in insertion order.
    """

    def __init__(self) -> None:
        self._events: dict[str, VotingEvent] = {}
        self._lock = asyncio.Lock()

    def _name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        return any(
            e.name == name and not e.cancelled and e.id != exclude_id
            for e in self._events.values()
        )

    async def insert(self, event: VotingEvent) -> VotingEvent:
        async with self._lock:
            if event.id in self._events:
                raise ValueError(f"Voting event already exists: {event.id}")
            if not event.cancelled and self._name_taken(event.name):
                raise DuplicateEventNameError(event.name)
            self._events[event.id] = event
            return event

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held by every write."""
        return self._lock

    def peek(self, event_id: str) -> VotingEvent | None:
        """Synchronous read for stores that already hold the lock."""
        return self._events.get(event_id)

    async def get(self, event_id: str) -> VotingEvent | None:
        return self._events.get(event_id)

    async def list_all(
        self,
        full: bool = False,
        include_cancelled: bool = False,
    ) -> list[VotingEvent]:
        events = [
            e for e in self._events.values() if include_cancelled or not e.cancelled
        ]
        if full:
            return events
        return [replace(e, technologies=(), blips=None) for e in events]

    async def update_cas(
        self, event: VotingEvent, expected_version: int
    ) -> VotingEvent:
        async with self._lock:
            current = self._events.get(event.id)
            if current is None:
                raise EventNotFoundError(event.id)
            if current.version != expected_version:
                raise ConcurrentModificationError(
                    event.id, expected_version, operation="update_event"
                )
            if not event.cancelled and self._name_taken(
                event.name, exclude_id=event.id
            ):
                raise DuplicateEventNameError(event.name)
            stored = replace(event, version=expected_version + 1)
            self._events[event.id] = stored
            return stored

    async def delete(self, event_id: str) -> bool:
        async with self._lock:
            return self._events.pop(event_id, None) is not None

    def clear(self) -> None:
        """Remove every event (test helper)."""
        self._events.clear()
