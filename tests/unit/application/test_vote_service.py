"""Unit tests for VoteService."""

import pytest

from tech_radar.application.services import VoteRequest, VoteService, VotingEventService
from tech_radar.domain.errors import (
    DuplicateVoteError,
    EventNotFoundError,
    StaleRoundError,
    TechnologyNotPresentError,
    VotingEventNotOpenError,
)
from tech_radar.domain.models import Ring, RingCount, TagCount, VoterIdentity
from tech_radar.infrastructure.stubs import VoteStoreStub

RUST = "tech-rust"
K8S = "tech-kubernetes"


@pytest.fixture
async def event_id(voting_event_service: VotingEventService) -> str:
    event = await voting_event_service.create_voting_event("Radar")
    await voting_event_service.open_voting_event(event.id)
    return event.id


def _voter(first: str, last: str = "") -> VoterIdentity:
    return VoterIdentity(first_name=first, last_name=last)


class TestSaveVotes:
    """Tests for save_votes()."""

    async def test_stores_ballot_in_current_round(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        votes = await vote_service.save_votes(
            event_id,
            _voter("Ann"),
            [
                VoteRequest(RUST, Ring.HOLD, tags=(" cloud ", "")),
                VoteRequest(K8S, Ring.ADOPT, comment="great", comment_author="ann"),
            ],
        )

        assert [v.technology.name for v in votes] == ["Rust", "Kubernetes"]
        assert all(v.event_round == 1 for v in votes)
        assert votes[0].tags == ("cloud",)
        assert votes[1].comment.roots[0].text == "great"
        assert votes[1].comment.roots[0].author == "ann"

    async def test_same_voter_normalized_is_duplicate(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        await vote_service.save_votes(
            event_id, _voter("One", "Two"), [VoteRequest(RUST, Ring.HOLD)]
        )

        with pytest.raises(DuplicateVoteError) as exc_info:
            await vote_service.save_votes(
                event_id, _voter("One ", "  twO "), [VoteRequest(RUST, Ring.ADOPT)]
            )

        assert exc_info.value.voter_key == "one|two"

    async def test_duplicate_rejects_whole_batch(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        await vote_service.save_votes(
            event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD)]
        )

        with pytest.raises(DuplicateVoteError):
            await vote_service.save_votes(
                event_id,
                _voter("ann"),
                [VoteRequest(K8S, Ring.HOLD), VoteRequest(RUST, Ring.HOLD)],
            )

        assert len(await vote_service.get_votes(event_id=event_id)) == 1

    async def test_same_technology_twice_in_ballot_rejected(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        with pytest.raises(DuplicateVoteError):
            await vote_service.save_votes(
                event_id,
                _voter("Ann"),
                [VoteRequest(RUST, Ring.HOLD), VoteRequest(RUST, Ring.TRIAL)],
            )

        assert await vote_service.get_votes(event_id=event_id) == []

    async def test_event_not_open(
        self, vote_service: VoteService, voting_event_service: VotingEventService
    ) -> None:
        event = await voting_event_service.create_voting_event("Radar")

        with pytest.raises(VotingEventNotOpenError):
            await vote_service.save_votes(
                event.id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD)]
            )

    async def test_cancelled_event_not_found(
        self,
        vote_service: VoteService,
        voting_event_service: VotingEventService,
        event_id: str,
    ) -> None:
        await voting_event_service.cancel_voting_event(event_id)

        with pytest.raises(EventNotFoundError):
            await vote_service.save_votes(
                event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD)]
            )

    async def test_stale_round(
        self,
        vote_service: VoteService,
        voting_event_service: VotingEventService,
        event_id: str,
    ) -> None:
        await voting_event_service.move_to_next_flow_step(event_id)

        with pytest.raises(StaleRoundError) as exc_info:
            await vote_service.save_votes(
                event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD, event_round=1)]
            )

        assert exc_info.value.current_round == 2

    async def test_unknown_technology(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        with pytest.raises(TechnologyNotPresentError):
            await vote_service.save_votes(
                event_id, _voter("Ann"), [VoteRequest("nope", Ring.HOLD)]
            )

    async def test_empty_ballot_stores_nothing(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        assert await vote_service.save_votes(event_id, _voter("Ann"), []) == []


class TestQueries:
    """Tests for has_already_voted, get_voters, aggregate_votes, delete_votes."""

    async def test_has_already_voted(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        await vote_service.save_votes(
            event_id, _voter("Ann", "Lee"), [VoteRequest(RUST, Ring.HOLD)]
        )

        assert await vote_service.has_already_voted(event_id, _voter(" ann", "LEE"))
        assert not await vote_service.has_already_voted(event_id, _voter("Bob"))
        assert not await vote_service.has_already_voted(
            event_id, _voter("Ann", "Lee"), event_round=2
        )

    async def test_voters_deduplicated_in_first_vote_order(
        self, vote_service: VoteService, event_id: str
    ) -> None:
        await vote_service.save_votes(
            event_id,
            _voter("Bob"),
            [VoteRequest(RUST, Ring.HOLD), VoteRequest(K8S, Ring.HOLD)],
        )
        await vote_service.save_votes(
            event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD)]
        )

        voters = await vote_service.get_voters(event_id)

        assert [v.first_name for v in voters] == ["Bob", "Ann"]

    async def test_aggregate(self, vote_service: VoteService, event_id: str) -> None:
        await vote_service.save_votes(
            event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD, tags=("x",))]
        )
        await vote_service.save_votes(
            event_id, _voter("Bob"), [VoteRequest(RUST, Ring.HOLD, tags=("x",))]
        )

        [tally] = await vote_service.aggregate_votes(event_id)

        assert tally.votes_for_ring == (RingCount(Ring.HOLD, 2),)
        assert tally.votes_for_tag == (TagCount("x", 2),)

    async def test_delete_votes(
        self, vote_service: VoteService, vote_store: VoteStoreStub, event_id: str
    ) -> None:
        await vote_service.save_votes(
            event_id, _voter("Ann"), [VoteRequest(RUST, Ring.HOLD)]
        )

        deleted = await vote_service.delete_votes(event_id)

        assert deleted == 1
        assert await vote_store.find(event_id=event_id) == []
