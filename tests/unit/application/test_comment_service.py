"""Unit tests for CommentService."""

import pytest

from tech_radar.application.services import (
    CommentService,
    VoteRequest,
    VoteService,
    VotingEventService,
)
from tech_radar.domain.errors import (
    CommentTargetNotFoundError,
    ConcurrentModificationError,
    EventNotFoundError,
    TechnologyNotPresentError,
    VoteNotFoundError,
)
from tech_radar.domain.models import Ring, Vote, VoterIdentity
from tech_radar.domain.services import comment_tree
from tech_radar.infrastructure.stubs import VoteStoreStub

RUST = "tech-rust"
K8S = "tech-kubernetes"


@pytest.fixture
async def event_id(voting_event_service: VotingEventService) -> str:
    event = await voting_event_service.create_voting_event("Radar")
    await voting_event_service.open_voting_event(event.id)
    return event.id


@pytest.fixture
async def commented_vote(vote_service: VoteService, event_id: str) -> Vote:
    votes = await vote_service.save_votes(
        event_id,
        VoterIdentity(first_name="Ann"),
        [
            VoteRequest(RUST, Ring.HOLD, comment="too early", comment_author="ann"),
            VoteRequest(K8S, Ring.ADOPT),
        ],
    )
    return votes[0]


class TestTechnologyComments:
    """Tests for comments on the technologies of an event."""

    async def test_add_comment(
        self, comment_service: CommentService, event_id: str
    ) -> None:
        event, comment_id = await comment_service.add_comment_to_technology(
            event_id, RUST, "worth a look", author="bob"
        )

        thread = event.technology(RUST).comments
        assert thread.root_ids == (comment_id,)
        assert thread.get(comment_id).author == "bob"
        assert event.version == 2

    async def test_reply_to_reply(
        self, comment_service: CommentService, event_id: str
    ) -> None:
        _, c1 = await comment_service.add_comment_to_technology(event_id, RUST, "c1")
        _, r1 = await comment_service.add_reply_to_technology_comment(
            event_id, RUST, c1, "r1"
        )

        event, r2 = await comment_service.add_reply_to_technology_comment(
            event_id, RUST, r1, "r2"
        )

        thread = event.technology(RUST).comments
        assert comment_tree.depth_of(thread, r2) == 2
        assert [c.text for c, _ in thread.walk()] == ["c1", "r1", "r2"]

    async def test_reply_to_missing_target(
        self, comment_service: CommentService, event_id: str
    ) -> None:
        with pytest.raises(CommentTargetNotFoundError):
            await comment_service.add_reply_to_technology_comment(
                event_id, RUST, "nope", "text"
            )

    async def test_unknown_technology(
        self, comment_service: CommentService, event_id: str
    ) -> None:
        with pytest.raises(TechnologyNotPresentError):
            await comment_service.add_comment_to_technology(event_id, "nope", "x")

    async def test_unknown_event(self, comment_service: CommentService) -> None:
        with pytest.raises(EventNotFoundError):
            await comment_service.add_comment_to_technology("missing", RUST, "x")


class TestVoteComments:
    """Tests for replies on vote comments."""

    async def test_reply_to_vote_comment(
        self, comment_service: CommentService, commented_vote: Vote
    ) -> None:
        [root] = commented_vote.comment.roots

        vote, reply_id = await comment_service.add_reply_to_vote_comment(
            commented_vote.id, root.id, "agreed", author="bob"
        )

        assert vote.version == commented_vote.version + 1
        assert vote.comment.replies_to(root.id)[0].id == reply_id

    async def test_vote_not_found(self, comment_service: CommentService) -> None:
        with pytest.raises(VoteNotFoundError):
            await comment_service.add_reply_to_vote_comment("nope", "c1", "text")

    async def test_vote_without_comment(
        self,
        comment_service: CommentService,
        vote_service: VoteService,
        event_id: str,
        commented_vote: Vote,
    ) -> None:
        [plain] = await vote_service.get_votes(event_id=event_id, technology_id=K8S)

        with pytest.raises(CommentTargetNotFoundError):
            await comment_service.add_reply_to_vote_comment(plain.id, "c1", "text")

    async def test_lost_update_detected(
        self,
        comment_service: CommentService,
        vote_store: VoteStoreStub,
        commented_vote: Vote,
    ) -> None:
        [root] = commented_vote.comment.roots
        await vote_store.update_cas(commented_vote, commented_vote.version)

        with pytest.raises(ConcurrentModificationError):
            await vote_store.update_cas(commented_vote, commented_vote.version)

        vote, _ = await comment_service.add_reply_to_vote_comment(
            commented_vote.id, root.id, "still works"
        )
        assert vote.version == commented_vote.version + 2


class TestCommentsForTechnology:
    """Tests for the per-technology comment queries."""

    async def test_votes_with_comments(
        self,
        comment_service: CommentService,
        commented_vote: Vote,
        event_id: str,
    ) -> None:
        votes = await comment_service.get_votes_with_comments_for_tech(RUST)
        none = await comment_service.get_votes_with_comments_for_tech(K8S, event_id)

        assert [v.id for v in votes] == [commented_vote.id]
        assert none == []

    async def test_nested_comments(
        self, comment_service: CommentService, commented_vote: Vote
    ) -> None:
        [root] = commented_vote.comment.roots
        await comment_service.add_reply_to_vote_comment(
            commented_vote.id, root.id, "agreed"
        )

        [doc] = await comment_service.get_votes_comments_for_tech(RUST)

        assert doc["text"] == "too early"
        assert [r["text"] for r in doc["replies"]] == ["agreed"]
