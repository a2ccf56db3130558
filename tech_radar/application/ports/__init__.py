"""Application ports (hexagonal architecture).

Ports are the interfaces the application services depend on. Adapters in
tech_radar.infrastructure implement them.
"""

from tech_radar.application.ports.identity_checker import IdentityCheckerProtocol
from tech_radar.application.ports.technology_catalog import TechnologyCatalogProtocol
from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol

__all__ = [
    "IdentityCheckerProtocol",
    "TechnologyCatalogProtocol",
    "VoteStoreProtocol",
    "VotingEventStoreProtocol",
]
