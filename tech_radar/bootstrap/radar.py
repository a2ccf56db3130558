"""Bootstrap wiring for the tech radar stores and services.

Selects the store backend from RadarConfig (in-memory stubs or the SQL
adapters) and keeps one instance of each store and service. Tests swap
instances with the set_* functions and restore defaults with
reset_radar_dependencies().
"""

from __future__ import annotations

from structlog import get_logger

from tech_radar.application.ports.identity_checker import IdentityCheckerProtocol
from tech_radar.application.ports.technology_catalog import TechnologyCatalogProtocol
from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services import (
    BlipService,
    CommentService,
    RecommendationService,
    VoteService,
    VotingEventService,
)
from tech_radar.config.radar_config import RadarConfig
from tech_radar.infrastructure.stubs import (
    IdentityCheckerStub,
    TechnologyCatalogStub,
    VoteStoreStub,
    VotingEventStoreStub,
)

logger = get_logger()

_config: RadarConfig | None = None
_event_store: VotingEventStoreProtocol | None = None
_vote_store: VoteStoreProtocol | None = None
_catalog: TechnologyCatalogProtocol | None = None
_identity_checker: IdentityCheckerProtocol | None = None


def get_radar_config() -> RadarConfig:
    global _config
    if _config is None:
        _config = RadarConfig.from_environment()
    return _config


def _init_stores() -> None:
    global _event_store, _vote_store
    config = get_radar_config()
    if config.store_backend == "sql":
        from tech_radar.bootstrap.database import get_session_factory
        from tech_radar.infrastructure.adapters.persistence import (
            SqlVoteStore,
            SqlVotingEventStore,
        )

        session_factory = get_session_factory(config.database_url)
        _event_store = SqlVotingEventStore(session_factory)
        _vote_store = SqlVoteStore(session_factory)
        logger.info("radar_stores_initialized", store_type="SQL")
    else:
        event_store = VotingEventStoreStub()
        _event_store = event_store
        _vote_store = VoteStoreStub(event_store)
        logger.warning(
            "radar_stores_initialized",
            store_type="InMemoryStub",
            message="RADAR_STORE_BACKEND is memory - data will not persist",
        )


def get_voting_event_store() -> VotingEventStoreProtocol:
    if _event_store is None:
        _init_stores()
    assert _event_store is not None
    return _event_store


def get_vote_store() -> VoteStoreProtocol:
    if _vote_store is None:
        _init_stores()
    assert _vote_store is not None
    return _vote_store


def get_technology_catalog() -> TechnologyCatalogProtocol:
    global _catalog
    if _catalog is None:
        _catalog = TechnologyCatalogStub()
    return _catalog


def get_identity_checker() -> IdentityCheckerProtocol:
    global _identity_checker
    if _identity_checker is None:
        _identity_checker = IdentityCheckerStub(get_radar_config().identity_tokens)
    return _identity_checker


def build_voting_event_service() -> VotingEventService:
    return VotingEventService(
        event_store=get_voting_event_store(),
        vote_store=get_vote_store(),
        catalog=get_technology_catalog(),
        default_timeout=get_radar_config().store_timeout_seconds,
    )


def build_vote_service() -> VoteService:
    return VoteService(
        vote_store=get_vote_store(),
        event_store=get_voting_event_store(),
        default_timeout=get_radar_config().store_timeout_seconds,
    )


def build_blip_service() -> BlipService:
    return BlipService(
        vote_store=get_vote_store(),
        event_store=get_voting_event_store(),
        default_timeout=get_radar_config().store_timeout_seconds,
    )


def build_comment_service() -> CommentService:
    return CommentService(
        event_store=get_voting_event_store(),
        vote_store=get_vote_store(),
        default_timeout=get_radar_config().store_timeout_seconds,
    )


def build_recommendation_service() -> RecommendationService:
    return RecommendationService(
        event_store=get_voting_event_store(),
        default_timeout=get_radar_config().store_timeout_seconds,
    )


def set_radar_config(config: RadarConfig) -> None:
    global _config
    _config = config


def set_stores(
    event_store: VotingEventStoreProtocol,
    vote_store: VoteStoreProtocol,
) -> None:
    global _event_store, _vote_store
    _event_store = event_store
    _vote_store = vote_store


def set_technology_catalog(catalog: TechnologyCatalogProtocol) -> None:
    global _catalog
    _catalog = catalog


def set_identity_checker(checker: IdentityCheckerProtocol) -> None:
    global _identity_checker
    _identity_checker = checker


def reset_radar_dependencies() -> None:
    """Reset all singletons for testing."""
    global _config, _event_store, _vote_store, _catalog, _identity_checker
    _config = None
    _event_store = None
    _vote_store = None
    _catalog = None
    _identity_checker = None
