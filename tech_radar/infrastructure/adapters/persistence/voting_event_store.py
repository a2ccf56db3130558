"""SQL voting event store.

Implements VotingEventStoreProtocol on SQLAlchemy async sessions. The
compare-and-set is a single ``UPDATE ... WHERE id = :id AND version =
:expected``; name uniqueness among live events is left to the partial
unique index.
"""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import delete, false, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    DuplicateEventNameError,
    EventNotFoundError,
)
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.infrastructure.adapters.persistence.tables import voting_events

logger = get_logger()


def _row_values(event: VotingEvent) -> dict:
    return {
        "id": event.id,
        "name": event.name,
        "cancelled": event.cancelled,
        "version": event.version,
        "document": event.to_document(),
    }


class SqlVotingEventStore(VotingEventStoreProtocol):
    """Voting event store backed by PostgreSQL (or SQLite for local use).

    Attributes:
        _session_factory: Factory creating AsyncSession instances.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._log = logger.bind(component="sql_voting_event_store")

    async def insert(self, event: VotingEvent) -> VotingEvent:
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    insert(voting_events).values(**_row_values(event))
                )
        except IntegrityError as exc:
            self._log.warning("event_insert_conflict", name=event.name, error=str(exc))
            raise DuplicateEventNameError(event.name) from exc
        return event

    async def get(self, event_id: str) -> VotingEvent | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(voting_events.c.document).where(voting_events.c.id == event_id)
            )
            document = result.scalar_one_or_none()
        return VotingEvent.from_dict(document) if document is not None else None

    async def list_all(
        self,
        full: bool = False,
        include_cancelled: bool = False,
    ) -> list[VotingEvent]:
        query = select(voting_events.c.document).order_by(voting_events.c.seq)
        if not include_cancelled:
            query = query.where(voting_events.c.cancelled == false())
        async with self._session_factory() as session:
            documents = (await session.execute(query)).scalars().all()
        events = [VotingEvent.from_dict(doc) for doc in documents]
        if full:
            return events
        return [replace(e, technologies=(), blips=None) for e in events]

    async def update_cas(
        self, event: VotingEvent, expected_version: int
    ) -> VotingEvent:
        stored = replace(event, version=expected_version + 1)
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(voting_events)
                    .where(
                        voting_events.c.id == event.id,
                        voting_events.c.version == expected_version,
                    )
                    .values(**_row_values(stored))
                )
                if result.rowcount == 0:
                    exists = await session.execute(
                        select(voting_events.c.version).where(
                            voting_events.c.id == event.id
                        )
                    )
                    if exists.scalar_one_or_none() is None:
                        raise EventNotFoundError(event.id)
                    raise ConcurrentModificationError(
                        event.id, expected_version, operation="update_event"
                    )
        except IntegrityError as exc:
            raise DuplicateEventNameError(event.name) from exc
        return stored

    async def delete(self, event_id: str) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                delete(voting_events).where(voting_events.c.id == event_id)
            )
        return result.rowcount > 0
