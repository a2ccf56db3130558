"""SQLAlchemy table definitions for the SQL stores.

Each event and vote is kept as a JSON document next to the columns the
store filters on or constrains:

- voting_events: name is unique among rows that are not cancelled
  (partial unique index), version drives compare-and-set updates.
- votes: (event_id, event_round, technology_id, voter_key) is unique,
  so a duplicate vote fails on insert.

``seq`` preserves insertion order, which tallies rely on.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
    false,
)
from sqlalchemy.ext.asyncio import AsyncEngine

metadata = MetaData()

voting_events = Table(
    "voting_events",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("cancelled", Boolean, nullable=False, default=False),
    Column("version", Integer, nullable=False, default=0),
    Column("document", JSON, nullable=False),
)

Index(
    "uq_voting_events_active_name",
    voting_events.c.name,
    unique=True,
    sqlite_where=voting_events.c.cancelled == false(),
    postgresql_where=voting_events.c.cancelled == false(),
)

votes = Table(
    "votes",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column("event_id", String(64), nullable=False, index=True),
    Column("event_round", Integer, nullable=False),
    Column("technology_id", String(64), nullable=False),
    Column("voter_key", String(512), nullable=False),
    Column("version", Integer, nullable=False, default=0),
    Column("document", JSON, nullable=False),
    UniqueConstraint(
        "event_id",
        "event_round",
        "technology_id",
        "voter_key",
        name="uq_votes_voter_per_technology_round",
    ),
)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
