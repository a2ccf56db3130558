"""SQL vote store.

Implements VoteStoreProtocol on SQLAlchemy async sessions. A ballot is
inserted in one transaction; the unique constraint on
(event_id, event_round, technology_id, voter_key) rejects duplicates and
the transaction rolls back as a whole. A checked insert then locks the
event row (SELECT ... FOR UPDATE) in the same transaction and validates
the ballot against it, so a concurrent close or flow step either commits
before the check and rejects the ballot, or waits for it.
"""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import delete, insert, select, tuple_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    DuplicateVoteError,
    EventNotFoundError,
    VoteNotFoundError,
)
from tech_radar.domain.exceptions import RadarError
from tech_radar.domain.models.vote import Vote
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.infrastructure.adapters.persistence.tables import votes as votes_table
from tech_radar.infrastructure.adapters.persistence.tables import voting_events

logger = get_logger()


def _row_values(vote: Vote) -> dict:
    return {
        "id": vote.id,
        "event_id": vote.event_id,
        "event_round": vote.event_round,
        "technology_id": vote.technology.id,
        "voter_key": vote.voter_key,
        "version": vote.version,
        "document": vote.to_dict(),
    }


class SqlVoteStore(VoteStoreProtocol):
    """Vote store backed by PostgreSQL (or SQLite for local use)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._log = logger.bind(component="sql_vote_store")

    async def insert_many(self, votes: list[Vote], check_event: bool = False) -> None:
        seen: set[tuple[str, int, str, str]] = set()
        for vote in votes:
            if vote.unique_key in seen:
                raise DuplicateVoteError(*vote.unique_key)
            seen.add(vote.unique_key)
        if not votes:
            return
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(
                    insert(votes_table), [_row_values(vote) for vote in votes]
                )
                if check_event:
                    await self._check_event(session, votes)
        except IntegrityError as exc:
            self._log.warning("vote_insert_conflict", count=len(votes))
            collision = await self._first_collision(votes)
            raise DuplicateVoteError(*collision.unique_key) from exc

    async def _check_event(self, session: AsyncSession, votes: list[Vote]) -> None:
        event_id = votes[0].event_id
        result = await session.execute(
            select(voting_events.c.document)
            .where(voting_events.c.id == event_id)
            .with_for_update()
        )
        document = result.scalar_one_or_none()
        event = VotingEvent.from_dict(document) if document is not None else None
        if event is None or event.cancelled:
            raise EventNotFoundError(event_id)
        try:
            event.check_ballot(votes)
        except RadarError as exc:
            self._log.warning(
                "checked_vote_insert_rejected",
                reason=type(exc).__name__,
                event_id=event_id,
                count=len(votes),
            )
            raise

    async def _first_collision(self, votes: list[Vote]) -> Vote:
        keys = [
            (v.event_id, v.event_round, v.technology.id, v.voter_key) for v in votes
        ]
        async with self._session_factory() as session:
            result = await session.execute(
                select(
                    votes_table.c.event_id,
                    votes_table.c.event_round,
                    votes_table.c.technology_id,
                    votes_table.c.voter_key,
                ).where(
                    tuple_(
                        votes_table.c.event_id,
                        votes_table.c.event_round,
                        votes_table.c.technology_id,
                        votes_table.c.voter_key,
                    ).in_(keys)
                )
            )
            stored = {tuple(row) for row in result.all()}
        return next((v for v in votes if v.unique_key in stored), votes[0])

    async def get(self, vote_id: str) -> Vote | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(votes_table.c.document).where(votes_table.c.id == vote_id)
            )
            document = result.scalar_one_or_none()
        return Vote.from_dict(document) if document is not None else None

    async def find(
        self,
        event_id: str | None = None,
        technology_id: str | None = None,
        event_round: int | None = None,
    ) -> list[Vote]:
        query = select(votes_table.c.document).order_by(votes_table.c.seq)
        if event_id is not None:
            query = query.where(votes_table.c.event_id == event_id)
        if technology_id is not None:
            query = query.where(votes_table.c.technology_id == technology_id)
        if event_round is not None:
            query = query.where(votes_table.c.event_round == event_round)
        async with self._session_factory() as session:
            documents = (await session.execute(query)).scalars().all()
        return [Vote.from_dict(doc) for doc in documents]

    async def update_cas(self, vote: Vote, expected_version: int) -> Vote:
        stored = replace(vote, version=expected_version + 1)
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                update(votes_table)
                .where(
                    votes_table.c.id == vote.id,
                    votes_table.c.version == expected_version,
                )
                .values(version=stored.version, document=stored.to_dict())
            )
            if result.rowcount == 0:
                exists = await session.execute(
                    select(votes_table.c.version).where(votes_table.c.id == vote.id)
                )
                if exists.scalar_one_or_none() is None:
                    raise VoteNotFoundError(vote.id)
                raise ConcurrentModificationError(
                    vote.id, expected_version, operation="update_vote"
                )
        return stored

    async def delete_by_event(self, event_id: str) -> int:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                delete(votes_table).where(votes_table.c.event_id == event_id)
            )
        return result.rowcount
