"""SQL stores on an in-memory SQLite database (aiosqlite)."""

from collections.abc import AsyncIterator
from dataclasses import replace

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from tech_radar.application.services import (
    BlipService,
    CommentService,
    RecommendationService,
    VoteRequest,
    VoteService,
    VotingEventService,
)
from tech_radar.bootstrap.database import create_engine, get_database_url
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    DuplicateEventNameError,
    DuplicateVoteError,
    EventNotFoundError,
    StaleRoundError,
    VoteNotFoundError,
    VotingEventNotOpenError,
)
from tech_radar.domain.models import Ring, Technology, VoterIdentity, VotingEvent
from tech_radar.infrastructure.adapters.persistence import (
    SqlVoteStore,
    SqlVotingEventStore,
    create_schema,
)
from tech_radar.infrastructure.stubs import TechnologyCatalogStub
from tests.helpers.builders import make_vote

pytestmark = pytest.mark.integration

SQLITE_URL = "sqlite+aiosqlite:///:memory:"
RUST = "tech-rust"
K8S = "tech-kubernetes"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_engine(SQLITE_URL)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def event_store(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlVotingEventStore:
    return SqlVotingEventStore(session_factory)


@pytest.fixture
def vote_store(session_factory: async_sessionmaker[AsyncSession]) -> SqlVoteStore:
    return SqlVoteStore(session_factory)


class TestDatabaseUrl:
    """Tests for get_database_url()."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db/radar", "postgresql+asyncpg://u:p@db/radar"),
            ("postgres://db/radar", "postgresql+asyncpg://db/radar"),
            ("db/radar", "postgresql+asyncpg://db/radar"),
            (SQLITE_URL, SQLITE_URL),
        ],
    )
    def test_async_driver(self, url: str, expected: str) -> None:
        assert get_database_url(url) == expected

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValueError, match="DATABASE_URL"):
            get_database_url()


class TestSqlVotingEventStore:
    """Tests for SqlVotingEventStore."""

    async def test_round_trip(self, event_store: SqlVotingEventStore) -> None:
        event = VotingEvent(id="e1", name="Radar")

        await event_store.insert(event)

        assert await event_store.get("e1") == event
        assert await event_store.get("nope") is None

    async def test_name_unique_among_live_events(
        self, event_store: SqlVotingEventStore
    ) -> None:
        first = await event_store.insert(VotingEvent(id="e1", name="Radar"))

        with pytest.raises(DuplicateEventNameError):
            await event_store.insert(VotingEvent(id="e2", name="Radar"))

        await event_store.update_cas(first.with_cancelled(True), expected_version=0)
        await event_store.insert(VotingEvent(id="e2", name="Radar"))

        assert [e.id for e in await event_store.list_all()] == ["e2"]
        assert len(await event_store.list_all(include_cancelled=True)) == 2

    async def test_compare_and_set(self, event_store: SqlVotingEventStore) -> None:
        event = await event_store.insert(VotingEvent(id="e1", name="Radar"))

        stored = await event_store.update_cas(event.opened(), expected_version=0)

        assert stored.version == 1
        with pytest.raises(ConcurrentModificationError):
            await event_store.update_cas(event.opened(), expected_version=0)
        with pytest.raises(EventNotFoundError):
            await event_store.update_cas(
                VotingEvent(id="nope", name="x"), expected_version=0
            )

    async def test_delete(self, event_store: SqlVotingEventStore) -> None:
        await event_store.insert(VotingEvent(id="e1", name="Radar"))

        assert await event_store.delete("e1") is True
        assert await event_store.delete("e1") is False


class TestSqlVoteStore:
    """Tests for SqlVoteStore."""

    async def test_find_keeps_insertion_order(self, vote_store: SqlVoteStore) -> None:
        await vote_store.insert_many(
            [make_vote("t2", "hold", "Ann"), make_vote("t1", "adopt", "Ann")]
        )
        await vote_store.insert_many([make_vote("t1", "hold", "Bob")])

        found = await vote_store.find(event_id="event-1")

        assert [(v.technology.id, v.voter.first_name) for v in found] == [
            ("t2", "Ann"),
            ("t1", "Ann"),
            ("t1", "Bob"),
        ]
        assert len(await vote_store.find(technology_id="t1")) == 2
        assert await vote_store.find(event_round=2) == []

    async def test_duplicate_rolls_back_batch(self, vote_store: SqlVoteStore) -> None:
        await vote_store.insert_many([make_vote("t1", "hold", "Ann Lee")])

        with pytest.raises(DuplicateVoteError) as exc_info:
            await vote_store.insert_many(
                [
                    make_vote("t2", "hold", "Ann Lee"),
                    make_vote("t1", "adopt", "ann lee", vote_id="other"),
                ]
            )

        assert exc_info.value.technology_id == "t1"
        assert [v.technology.id for v in await vote_store.find()] == ["t1"]

    async def test_compare_and_set(self, vote_store: SqlVoteStore) -> None:
        vote = make_vote("t1", "hold", "Ann")
        await vote_store.insert_many([vote])

        stored = await vote_store.update_cas(replace(vote, tags=("x",)), 0)

        assert stored.version == 1
        assert (await vote_store.get(vote.id)).tags == ("x",)
        with pytest.raises(ConcurrentModificationError):
            await vote_store.update_cas(vote, 0)
        with pytest.raises(VoteNotFoundError):
            await vote_store.update_cas(make_vote("t9", "hold"), 0)

    async def test_delete_by_event(self, vote_store: SqlVoteStore) -> None:
        await vote_store.insert_many(
            [
                make_vote("t1", "hold", "Ann", event_id="e1"),
                make_vote("t1", "hold", "Ann", event_id="e2"),
            ]
        )

        assert await vote_store.delete_by_event("e1") == 1
        assert [v.event_id for v in await vote_store.find()] == ["e2"]

    async def test_checked_insert_follows_event(
        self, vote_store: SqlVoteStore, event_store: SqlVotingEventStore
    ) -> None:
        event = await event_store.insert(
            VotingEvent(
                id="event-1",
                name="Radar",
                technologies=(Technology(id="t1", name="t1"),),
            )
        )
        ann = make_vote("t1", "hold", "Ann")

        with pytest.raises(VotingEventNotOpenError):
            await vote_store.insert_many([ann], check_event=True)

        opened = await event_store.update_cas(event.opened(), expected_version=0)
        with pytest.raises(StaleRoundError):
            await vote_store.insert_many(
                [make_vote("t1", "hold", "Ann", event_round=2)], check_event=True
            )
        await vote_store.insert_many([ann], check_event=True)

        await event_store.update_cas(opened.closed(), expected_version=1)
        with pytest.raises(VotingEventNotOpenError):
            await vote_store.insert_many(
                [make_vote("t1", "hold", "Bob")], check_event=True
            )
        with pytest.raises(EventNotFoundError):
            await vote_store.insert_many(
                [make_vote("t1", "hold", "Bob", event_id="nope")], check_event=True
            )

        assert [v.voter.first_name for v in await vote_store.find()] == ["Ann"]


async def test_full_flow_on_sql_stores(
    event_store: SqlVotingEventStore, vote_store: SqlVoteStore
) -> None:
    events = VotingEventService(event_store, vote_store, TechnologyCatalogStub())
    votes = VoteService(vote_store, event_store)
    blips = BlipService(vote_store, event_store)
    comments = CommentService(event_store, vote_store)
    recommendations = RecommendationService(event_store)

    event = await events.create_voting_event("Radar")
    await events.open_voting_event(event.id)
    for name, ring in (("Ann", Ring.HOLD), ("Bob", Ring.ADOPT)):
        await votes.save_votes(
            event.id,
            VoterIdentity(first_name=name),
            [
                VoteRequest(RUST, ring, comment=f"{name} says {ring.value}"),
                VoteRequest(K8S, Ring.ADOPT),
            ],
        )

    resolved = await blips.calculate_blips(event.id)
    advanced = await events.move_to_next_flow_step(event.id)
    vote, _ = await comments.get_votes_with_comments_for_tech(RUST, event.id)
    await comments.add_reply_to_vote_comment(
        vote.id, vote.comment.root_ids[0], "agreed"
    )
    claimed = await recommendations.set_recommendation_author(event.id, "Rust", "A")

    assert [b.technology_name for b in resolved] == ["Rust", "Kubernetes"]
    assert resolved[0].for_revote is True
    assert advanced.round == 2
    assert advanced.technology(RUST).is_eligible_in_round(2) is True
    assert advanced.technology(K8S).is_eligible_in_round(2) is False
    assert claimed.technology_named("Rust").recommendation_author == "A"
    ann, bob = await comments.get_votes_comments_for_tech(RUST, event.id)
    assert ann["text"] == "Ann says hold"
    assert ann["replies"][0]["text"] == "agreed"
    assert "replies" not in bob
