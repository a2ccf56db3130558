"""SQL persistence adapters (SQLAlchemy async)."""

from tech_radar.infrastructure.adapters.persistence.tables import create_schema
from tech_radar.infrastructure.adapters.persistence.vote_store import SqlVoteStore
from tech_radar.infrastructure.adapters.persistence.voting_event_store import (
    SqlVotingEventStore,
)

__all__ = ["SqlVoteStore", "SqlVotingEventStore", "create_schema"]
