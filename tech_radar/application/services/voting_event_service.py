"""Voting event service.

Owns the lifecycle of voting events: creation, open and close, soft and
hard cancellation, the revote flag, and advancing the flow step. Every
change is computed on the domain model and written back with a
compare-and-set on the event version, so an operation either applies
completely or leaves the stored event untouched.

Developer Golden Rules:
1. VALIDATE BEFORE WRITE - Domain rules are checked on the read copy
2. HIDE BEFORE DELETE - A hard cancel soft-cancels before removing data
3. FAIL LOUD - A lost compare-and-set on a lifecycle change is reported
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, replace

from tech_radar.application.ports.technology_catalog import TechnologyCatalogProtocol
from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.base import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    EventStoreMixin,
)
from tech_radar.domain.errors import (
    ConcurrentModificationError,
    StaleRoundError,
    TechnologyAlreadyPresentError,
    VotingEventNotOpenError,
)
from tech_radar.domain.models.blip import VotingResult
from tech_radar.domain.models.technology import Technology, new_id
from tech_radar.domain.models.vote import Vote, VoterIdentity
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.domain.services import comment_tree
from tech_radar.domain.services.tally import latest_round_tallies


@dataclass(frozen=True)
class TechnologyActivity:
    """Voting activity on one technology of an event."""

    technology: Technology
    number_of_votes: int
    number_of_comments: int


@dataclass(frozen=True)
class VotingEventActivity:
    """An event together with per-technology activity counts."""

    event: VotingEvent
    technologies: list[TechnologyActivity]


def distinct_voters(votes: Iterable[Vote]) -> list[VoterIdentity]:
    """Voters in order of their first vote, deduplicated by normalized key."""
    voters: dict[str, VoterIdentity] = {}
    for vote in votes:
        voters.setdefault(vote.voter_key, vote.voter)
    return list(voters.values())


def _with_id(technology: Technology) -> Technology:
    return technology if technology.id else replace(technology, id=new_id())


class VotingEventService(EventStoreMixin):
    """Lifecycle operations on voting events.

    Attributes:
        _event_store: Voting event persistence.
        _vote_store: Vote persistence, read for tallies and deleted on
            hard cancel.
        _catalog: Source of the technologies snapshotted on first open.
    """

    def __init__(
        self,
        event_store: VotingEventStoreProtocol,
        vote_store: VoteStoreProtocol,
        catalog: TechnologyCatalogProtocol,
        default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._event_store = event_store
        self._vote_store = vote_store
        self._catalog = catalog
        self._init_logger(component="voting_event")
        self._init_store_calls(default_timeout)

    async def create_voting_event(
        self,
        name: str,
        initiative_name: str | None = None,
    ) -> VotingEvent:
        """Create a proposed event.

        Raises:
            DuplicateEventNameError: If a non-cancelled event has the name.
        """
        log = self._log_operation("create_voting_event", name=name)
        event = VotingEvent(
            id=new_id(), name=name.strip(), initiative_name=initiative_name
        )
        stored = await self._call_store("insert_event", self._event_store.insert(event))
        log.info("voting_event_created", event_id=stored.id)
        return stored

    async def get_voting_event(self, event_id: str) -> VotingEvent:
        """Fetch a visible event.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
        """
        return await self._get_event(event_id)

    async def get_voting_events(self, full: bool = False) -> list[VotingEvent]:
        """List non-cancelled events; technologies and blips only if ``full``."""
        return await self._call_store(
            "list_events", self._event_store.list_all(full=full)
        )

    async def open_voting_event(self, event_id: str) -> VotingEvent:
        """Open an event from proposed or closed.

        The first open sets round 1 and snapshots the initiative's
        technologies unless the event already has some.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            InvalidStateTransitionError: If the event is already open.
            InitiativeNotFoundError: If the event names an initiative the
                catalog does not know.
        """
        log = self._log_operation("open_voting_event", event_id=event_id)
        event = await self._get_event(event_id)
        catalog: list[Technology] = []
        if not event.technologies:
            catalog = await self._call_store(
                "list_technologies",
                self._catalog.list_technologies(event.initiative_name),
            )
        opened = event.opened(_with_id(t) for t in catalog)
        stored = await self._commit_event(event, opened)
        log.info(
            "voting_event_opened",
            round=stored.round,
            technologies=len(stored.technologies),
        )
        return stored

    async def close_voting_event(self, event_id: str) -> VotingEvent:
        """Close an open event. Votes are kept.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            InvalidStateTransitionError: If the event is not open.
        """
        log = self._log_operation("close_voting_event", event_id=event_id)
        event = await self._get_event(event_id)
        stored = await self._commit_event(event, event.closed())
        log.info("voting_event_closed", round=stored.round)
        return stored

    async def cancel_voting_event(self, event_id: str, hard: bool = False) -> None:
        """Cancel an event.

        A soft cancel hides the event and keeps everything. A hard cancel
        soft-cancels first, then deletes the event's votes and finally the
        event. If a step fails the event stays cancelled, with or without
        its votes, and the hard cancel can be repeated.

        Raises:
            EventNotFoundError: If the id does not resolve.
        """
        log = self._log_operation(
            "cancel_voting_event", event_id=event_id, hard=hard
        )
        event = await self._get_event(event_id, include_cancelled=hard)
        if not event.cancelled:
            await self._commit_event(event, event.with_cancelled(True))
            log.info("voting_event_cancelled")
        if not hard:
            return
        deleted_votes = await self._call_store(
            "delete_votes", self._vote_store.delete_by_event(event_id)
        )
        await self._call_store("delete_event", self._event_store.delete(event_id))
        log.info("voting_event_deleted", deleted_votes=deleted_votes)

    async def undo_cancel_voting_event(self, event_id: str) -> VotingEvent:
        """Reverse a soft cancel.

        Raises:
            EventNotFoundError: If the id does not resolve.
            DuplicateEventNameError: If another event took the name meanwhile.
        """
        log = self._log_operation("undo_cancel_voting_event", event_id=event_id)
        event = await self._get_event(event_id, include_cancelled=True)
        if not event.cancelled:
            return event
        stored = await self._commit_event(event, event.with_cancelled(False))
        log.info("voting_event_cancel_undone")
        return stored

    async def open_for_revote(self, event_id: str, round_number: int) -> VotingEvent:
        """Set the revote flag for the current round.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            VotingEventNotOpenError: If the event is not open.
            StaleRoundError: If ``round_number`` is not the current round.
        """
        log = self._log_operation(
            "open_for_revote", event_id=event_id, round=round_number
        )
        event = await self._get_event(event_id)
        self._require_open(event, "open_for_revote")
        if event.round != round_number:
            log.warning(
                "open_for_revote_rejected_stale_round", current_round=event.round
            )
            raise StaleRoundError(
                event_id,
                expected_round=round_number,
                current_round=event.round,
                operation="open_for_revote",
            )
        stored = await self._commit_event(event, event.with_open_for_revote(True))
        log.info("voting_event_opened_for_revote")
        return stored

    async def close_for_revote(self, event_id: str) -> VotingEvent:
        """Clear the revote flag."""
        log = self._log_operation("close_for_revote", event_id=event_id)
        event = await self._get_event(event_id)
        stored = await self._commit_event(event, event.with_open_for_revote(False))
        log.info("voting_event_closed_for_revote")
        return stored

    async def move_to_next_flow_step(self, event_id: str) -> VotingEvent:
        """Freeze the current tallies and advance the round by one.

        Each technology's voting result becomes the tally of the most
        recent round, up to the current one, in which it received votes.
        Running this twice without new votes freezes identical tallies.

        Ballots for the current round may still land between reading the
        votes and advancing. Once the round has moved no more can, so the
        votes are read once more and the frozen results corrected if a
        late ballot changed them.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            VotingEventNotOpenError: If the event is not open.
            StaleRoundError: If another operation advanced the round first.
        """
        log = self._log_operation("move_to_next_flow_step", event_id=event_id)
        event = await self._get_event(event_id)
        self._require_open(event, "move_to_next_flow_step")
        current_round = event.round or 1

        results = await self._frozen_results(event_id, current_round)
        try:
            stored = await self._commit_event(event, event.advanced(results))
        except ConcurrentModificationError:
            latest = await self._call_store(
                "get_event", self._event_store.get(event_id)
            )
            latest_round = latest.round if latest is not None else None
            if latest_round == event.round:
                raise
            log.warning("flow_step_lost_race", current_round=latest_round)
            raise StaleRoundError(
                event_id, expected_round=event.round, current_round=latest_round
            ) from None
        late_results = await self._frozen_results(event_id, current_round)
        if late_results != results:
            log.info("flow_step_late_ballots", round=current_round)
            results = late_results
            stored = await self._reapply_event(
                stored,
                lambda latest: (
                    latest.with_voting_results(late_results)
                    if latest.round == current_round + 1
                    else latest
                ),
            )
        log.info(
            "flow_step_advanced",
            previous_round=current_round,
            round=stored.round,
            frozen_results=len(results),
        )
        return stored

    async def _frozen_results(
        self, event_id: str, current_round: int
    ) -> dict[str, VotingResult]:
        votes = await self._call_store(
            "find_votes", self._vote_store.find(event_id=event_id)
        )
        return {
            technology_id: VotingResult.from_tally(tally, tally_round)
            for technology_id, (tally_round, tally) in latest_round_tallies(
                votes, current_round
            ).items()
        }

    async def add_new_technology(
        self, event_id: str, technology: Technology
    ) -> VotingEvent:
        """Add a technology to an event that has been opened.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            VotingEventNotOpenError: If the event was never opened.
            TechnologyAlreadyPresentError: If the name is already used.
        """
        log = self._log_operation(
            "add_new_technology", event_id=event_id, technology=technology.name
        )
        event = await self._get_event(event_id)
        if event.round is None:
            raise VotingEventNotOpenError(
                event_id, event.effective_status.value, "add_new_technology"
            )
        updated = event.with_added_technology(_with_id(technology))
        stored = await self._commit_event(event, updated)
        log.info("technology_added", technologies=len(stored.technologies))
        return stored

    async def set_technologies(
        self, event_id: str, technologies: Iterable[Technology]
    ) -> VotingEvent:
        """Replace the technology list, assigning ids where missing.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyAlreadyPresentError: If two technologies share a name.
        """
        log = self._log_operation("set_technologies", event_id=event_id)
        event = await self._get_event(event_id)
        seen: set[str] = set()
        prepared = []
        for technology in technologies:
            if technology.name in seen:
                raise TechnologyAlreadyPresentError(event_id, technology.name)
            seen.add(technology.name)
            prepared.append(_with_id(technology))
        stored = await self._commit_event(event, event.with_technologies(prepared))
        log.info("technologies_set", technologies=len(prepared))
        return stored

    async def calculate_winner(
        self,
        event_id: str,
        rng: random.Random | None = None,
    ) -> VoterIdentity | None:
        """Draw one voter at random and record them as the event winner.

        Returns:
            The winner, or None when nobody voted.
        """
        log = self._log_operation("calculate_winner", event_id=event_id)
        event = await self._get_event(event_id)
        votes = await self._call_store(
            "find_votes", self._vote_store.find(event_id=event_id)
        )
        voters = distinct_voters(votes)
        if not voters:
            log.info("winner_not_drawn_no_voters")
            return None
        winner = (rng or random.Random()).choice(voters)
        await self._commit_event(event, event.with_winner(winner))
        log.info("winner_drawn", voters=len(voters))
        return winner

    async def get_voting_event_with_activity(
        self, event_id: str
    ) -> VotingEventActivity:
        """Per technology, count its votes and every comment on them.

        Comment counts include replies at any depth.
        """
        event = await self._get_event(event_id)
        votes = await self._call_store(
            "find_votes", self._vote_store.find(event_id=event_id)
        )
        vote_counts: dict[str, int] = {}
        comment_counts: dict[str, int] = {}
        for vote in votes:
            tech_id = vote.technology.id
            vote_counts[tech_id] = vote_counts.get(tech_id, 0) + 1
            comment_counts[tech_id] = comment_counts.get(
                tech_id, 0
            ) + comment_tree.count(vote.comment)
        return VotingEventActivity(
            event=event,
            technologies=[
                TechnologyActivity(
                    technology=tech,
                    number_of_votes=vote_counts.get(tech.id, 0),
                    number_of_comments=comment_counts.get(tech.id, 0),
                )
                for tech in event.technologies
            ],
        )

    def _require_open(self, event: VotingEvent, operation: str) -> None:
        if not event.is_open:
            raise VotingEventNotOpenError(
                event.id, event.effective_status.value, operation
            )
