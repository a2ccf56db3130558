"""Vote service.

Accepts ballots and answers questions about stored votes. A ballot is
checked against the event (open, current round, technology present and
eligible) before anything is written, and inserted as a single batch:
the store's uniqueness constraint rejects the whole batch when any vote
collides with an earlier one. The store repeats the event check atomically
with the insert, so a close or flow step committed after the first check
still keeps the ballot out.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.base import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    EventStoreMixin,
)
from tech_radar.application.services.voting_event_service import distinct_voters
from tech_radar.domain.errors import (
    StaleRoundError,
    TechnologyNotEligibleError,
    VotingEventNotOpenError,
)
from tech_radar.domain.models.blip import TechnologyTally
from tech_radar.domain.models.comment import CommentThread
from tech_radar.domain.models.ring import Ring
from tech_radar.domain.models.technology import new_id
from tech_radar.domain.models.vote import TechnologyRef, Vote, VoterIdentity
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.domain.services import comment_tree
from tech_radar.domain.services.tally import tally_votes


@dataclass(frozen=True)
class VoteRequest:
    """One entry of a ballot.

    Attributes:
        technology_id: Technology voted on.
        ring: Chosen ring.
        tags: Optional free-text tags.
        comment: Optional comment text.
        comment_author: Optional author of the comment.
        event_round: Round the voter believes is current; defaults to
            the event's current round.
    """

    technology_id: str
    ring: Ring
    tags: tuple[str, ...] = field(default=())
    comment: str | None = None
    comment_author: str | None = None
    event_round: int | None = None


class VoteService(EventStoreMixin):
    """Vote submission and vote queries."""

    def __init__(
        self,
        vote_store: VoteStoreProtocol,
        event_store: VotingEventStoreProtocol,
        default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._vote_store = vote_store
        self._event_store = event_store
        self._init_logger(component="vote")
        self._init_store_calls(default_timeout)

    async def save_votes(
        self,
        event_id: str,
        voter: VoterIdentity,
        requests: Sequence[VoteRequest],
    ) -> list[Vote]:
        """Record a voter's ballot.

        Args:
            event_id: Voting event.
            voter: Who is voting.
            requests: One entry per technology.

        Returns:
            The stored votes, in ballot order.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            VotingEventNotOpenError: If the event is not open.
            StaleRoundError: If an entry names a round that is not current.
            TechnologyNotPresentError: If a technology is not in the event.
            TechnologyNotEligibleError: If a technology is not up for
                voting in the current round.
            DuplicateVoteError: If the voter already voted for one of the
                technologies in this round. Nothing is stored.
        """
        log = self._log_operation(
            "save_votes", event_id=event_id, voter=voter.normalized_key()
        )
        event = await self._get_event(event_id)
        if not event.is_open:
            log.warning("votes_rejected_event_not_open")
            raise VotingEventNotOpenError(
                event_id, event.effective_status.value, "save_votes"
            )

        votes = [self._build_vote(event, voter, request) for request in requests]
        if not votes:
            return []
        await self._call_store(
            "insert_votes", self._vote_store.insert_many(votes, check_event=True)
        )
        log.info("votes_saved", count=len(votes), round=event.round)
        return votes

    def _build_vote(
        self,
        event: VotingEvent,
        voter: VoterIdentity,
        request: VoteRequest,
    ) -> Vote:
        current_round = event.round or 1
        if request.event_round is not None and request.event_round != current_round:
            raise StaleRoundError(
                event.id,
                expected_round=request.event_round,
                current_round=current_round,
                operation="save_votes",
            )
        technology = event.technology(request.technology_id)
        if not technology.is_eligible_in_round(current_round):
            raise TechnologyNotEligibleError(event.id, technology.id, current_round)
        comment = (
            comment_tree.single_comment(request.comment, request.comment_author)
            if request.comment
            else CommentThread()
        )
        return Vote(
            id=new_id(),
            event_id=event.id,
            event_round=current_round,
            technology=TechnologyRef(
                id=technology.id,
                name=technology.name,
                quadrant=technology.quadrant,
                is_new=technology.is_new,
            ),
            ring=request.ring,
            voter=voter,
            tags=tuple(tag.strip() for tag in request.tags if tag.strip()),
            comment=comment,
        )

    async def has_already_voted(
        self,
        event_id: str,
        voter: VoterIdentity,
        event_round: int | None = None,
    ) -> bool:
        """Whether the voter has a vote in the round (default: current)."""
        event = await self._get_event(event_id)
        round_number = event_round if event_round is not None else event.round
        votes = await self._call_store(
            "find_votes",
            self._vote_store.find(event_id=event_id, event_round=round_number),
        )
        key = voter.normalized_key()
        return any(vote.voter_key == key for vote in votes)

    async def get_votes(
        self,
        event_id: str | None = None,
        technology_id: str | None = None,
        event_round: int | None = None,
    ) -> list[Vote]:
        return await self._call_store(
            "find_votes",
            self._vote_store.find(
                event_id=event_id,
                technology_id=technology_id,
                event_round=event_round,
            ),
        )

    async def aggregate_votes(
        self,
        event_id: str,
        event_round: int | None = None,
    ) -> list[TechnologyTally]:
        """Ring and tag tallies per technology of an event."""
        votes = await self.get_votes(event_id=event_id)
        return tally_votes(votes, round_number=event_round)

    async def get_voters(self, event_id: str) -> list[VoterIdentity]:
        votes = await self.get_votes(event_id=event_id)
        return distinct_voters(votes)

    async def delete_votes(self, event_id: str) -> int:
        """Delete every vote of an event; returns how many were deleted."""
        log = self._log_operation("delete_votes", event_id=event_id)
        deleted = await self._call_store(
            "delete_votes", self._vote_store.delete_by_event(event_id)
        )
        log.info("votes_deleted", count=deleted)
        return deleted
