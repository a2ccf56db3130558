"""In-memory stub adapters for development and tests."""

from tech_radar.infrastructure.stubs.identity_checker_stub import IdentityCheckerStub
from tech_radar.infrastructure.stubs.technology_catalog_stub import (
    DEFAULT_TECHNOLOGIES,
    TechnologyCatalogStub,
)
from tech_radar.infrastructure.stubs.vote_store_stub import VoteStoreStub
from tech_radar.infrastructure.stubs.voting_event_store_stub import VotingEventStoreStub

__all__ = [
    "DEFAULT_TECHNOLOGIES",
    "IdentityCheckerStub",
    "TechnologyCatalogStub",
    "VoteStoreStub",
    "VotingEventStoreStub",
]
