"""
Pytest configuration and shared fixtures for Tech Radar tests.

Testing Standards:
- All async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Iterator

import pytest

from tech_radar.application.services import (
    BlipService,
    CommentService,
    RecommendationService,
    VoteService,
    VotingEventService,
)
from tech_radar.bootstrap.radar import reset_radar_dependencies
from tech_radar.infrastructure.stubs import (
    TechnologyCatalogStub,
    VoteStoreStub,
    VotingEventStoreStub,
)

TEST_TIMEOUT = 1.0


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from tech_radar import __version__

    return __version__


@pytest.fixture(autouse=True)
def _reset_bootstrap() -> Iterator[None]:
    """Each test starts with fresh bootstrap singletons."""
    reset_radar_dependencies()
    yield
    reset_radar_dependencies()


@pytest.fixture
def event_store() -> VotingEventStoreStub:
    return VotingEventStoreStub()


@pytest.fixture
def vote_store(event_store: VotingEventStoreStub) -> VoteStoreStub:
    return VoteStoreStub(event_store)


@pytest.fixture
def catalog() -> TechnologyCatalogStub:
    return TechnologyCatalogStub()


@pytest.fixture
def voting_event_service(
    event_store: VotingEventStoreStub,
    vote_store: VoteStoreStub,
    catalog: TechnologyCatalogStub,
) -> VotingEventService:
    return VotingEventService(
        event_store=event_store,
        vote_store=vote_store,
        catalog=catalog,
        default_timeout=TEST_TIMEOUT,
    )


@pytest.fixture
def vote_service(
    event_store: VotingEventStoreStub, vote_store: VoteStoreStub
) -> VoteService:
    return VoteService(
        vote_store=vote_store, event_store=event_store, default_timeout=TEST_TIMEOUT
    )


@pytest.fixture
def blip_service(
    event_store: VotingEventStoreStub, vote_store: VoteStoreStub
) -> BlipService:
    return BlipService(
        vote_store=vote_store, event_store=event_store, default_timeout=TEST_TIMEOUT
    )


@pytest.fixture
def comment_service(
    event_store: VotingEventStoreStub, vote_store: VoteStoreStub
) -> CommentService:
    return CommentService(
        event_store=event_store, vote_store=vote_store, default_timeout=TEST_TIMEOUT
    )


@pytest.fixture
def recommendation_service(
    event_store: VotingEventStoreStub,
) -> RecommendationService:
    return RecommendationService(event_store=event_store, default_timeout=TEST_TIMEOUT)

