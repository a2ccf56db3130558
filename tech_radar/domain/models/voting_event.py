"""Voting event domain model and state machine.

State Machine:
    PROPOSED -> OPEN (first open; round becomes 1, technologies snapshotted)
    OPEN -> CLOSED (votes frozen, not deleted)
    CLOSED -> OPEN (re-open; round unchanged)

CANCELLED is not a stored status. Soft cancellation sets a flag on top of
whatever status the event has, and ``effective_status`` reports CANCELLED
while the flag is set, so undoing the cancellation restores the event
exactly as it was.

The round counter and the revote flag only change through the methods of
VotingEvent; the voting event service persists the returned copy with a
compare-and-set on ``version``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from tech_radar.domain.errors.concurrent_modification import StaleRoundError
from tech_radar.domain.errors.state_transition import InvalidStateTransitionError
from tech_radar.domain.errors.voting_event import (
    TechnologyAlreadyPresentError,
    TechnologyNotEligibleError,
    TechnologyNotPresentError,
    VotingEventNotOpenError,
)
from tech_radar.domain.models.blip import Blip, VotingResult
from tech_radar.domain.models.technology import Technology, new_id
from tech_radar.domain.models.vote import Vote, VoterIdentity


class VotingEventStatus(Enum):
    """Lifecycle status of a voting event.

    States:
        PROPOSED: Created, not opened yet
        OPEN: A round is active and votes are accepted
        CLOSED: Votes are frozen
        CANCELLED: Reported while the soft-cancel flag is set
    """

    PROPOSED = "proposed"
    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    def valid_transitions(self) -> frozenset[VotingEventStatus]:
        return STATE_TRANSITION_MATRIX.get(self, frozenset())


STATE_TRANSITION_MATRIX: dict[VotingEventStatus, frozenset[VotingEventStatus]] = {
    VotingEventStatus.PROPOSED: frozenset({VotingEventStatus.OPEN}),
    VotingEventStatus.OPEN: frozenset({VotingEventStatus.CLOSED}),
    VotingEventStatus.CLOSED: frozenset({VotingEventStatus.OPEN}),
    # Never stored; cancellation is a flag.
    VotingEventStatus.CANCELLED: frozenset(),
}


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True, eq=True)
class VotingEvent:
    """A tech radar voting event.

    Attributes:
        id: Unique identifier.
        name: Event name; unique among non-cancelled events.
        status: Stored lifecycle status (never CANCELLED).
        round: Current round; None until the first open.
        open_for_revote: Revote flag; None until first set.
        technologies: Technologies rated in the event, in order.
        blips: Snapshot of the last blip calculation, if any.
        winner: Voter drawn by calculate_winner, if any.
        cancelled: Soft-cancel marker.
        initiative_name: Initiative the event belongs to, if any.
        created_at: Creation time (UTC).
        last_opened_at: Time of the most recent open.
        last_closed_at: Time of the most recent close.
        version: Incremented on every stored update.
    """

    id: str
    name: str
    status: VotingEventStatus = field(default=VotingEventStatus.PROPOSED)
    round: int | None = None
    open_for_revote: bool | None = None
    technologies: tuple[Technology, ...] = ()
    blips: tuple[Blip, ...] | None = None
    winner: VoterIdentity | None = None
    cancelled: bool = False
    initiative_name: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    last_opened_at: datetime | None = None
    last_closed_at: datetime | None = None
    version: int = 0

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Voting event name must not be empty")
        if self.status == VotingEventStatus.CANCELLED:
            raise ValueError("CANCELLED is not stored; use the cancelled flag")
        if self.round is not None and self.round < 1:
            raise ValueError(f"Round must be >= 1, got {self.round}")

    @property
    def effective_status(self) -> VotingEventStatus:
        """Status as seen by callers: CANCELLED while the flag is set."""
        return VotingEventStatus.CANCELLED if self.cancelled else self.status

    @property
    def is_open(self) -> bool:
        return not self.cancelled and self.status == VotingEventStatus.OPEN

    def with_status(self, new_status: VotingEventStatus) -> VotingEvent:
        """Return a copy in a new status, enforcing the transition matrix.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed.
        """
        allowed = self.status.valid_transitions()
        if new_status not in allowed:
            raise InvalidStateTransitionError(
                from_state=self.status,
                to_state=new_status,
                allowed_transitions=list(allowed),
            )
        return replace(self, status=new_status)

    def opened(
        self,
        catalog: Iterable[Technology] = (),
        now: datetime | None = None,
    ) -> VotingEvent:
        """Open the event.

        The first open sets round 1. Technologies are snapshotted from
        ``catalog`` only when the event has none yet, so a list given
        through set_technologies is kept.
        """
        event = self.with_status(VotingEventStatus.OPEN)
        technologies = event.technologies or tuple(catalog)
        return replace(
            event,
            round=event.round if event.round is not None else 1,
            technologies=technologies,
            last_opened_at=now or _utc_now(),
        )

    def closed(self, now: datetime | None = None) -> VotingEvent:
        event = self.with_status(VotingEventStatus.CLOSED)
        return replace(event, last_closed_at=now or _utc_now())

    def with_cancelled(self, cancelled: bool) -> VotingEvent:
        return replace(self, cancelled=cancelled)

    def with_open_for_revote(self, value: bool) -> VotingEvent:
        return replace(self, open_for_revote=value)

    def advanced(self, results: Mapping[str, VotingResult]) -> VotingEvent:
        """Freeze voting results into the technologies and move to the next round.

        Technologies absent from ``results`` keep their previous result.

        Args:
            results: Voting result per technology id.

        Returns:
            Copy with frozen voting results and round incremented by one.
        """
        current_round = self.round or 1
        return replace(self.with_voting_results(results), round=current_round + 1)

    def with_voting_results(self, results: Mapping[str, VotingResult]) -> VotingEvent:
        """Replace the frozen result of every technology named in ``results``."""
        technologies = tuple(
            tech.with_voting_result(results[tech.id]) if tech.id in results else tech
            for tech in self.technologies
        )
        return replace(self, technologies=technologies)

    def check_ballot(
        self, votes: Iterable[Vote], operation: str = "save_votes"
    ) -> None:
        """Raise unless every vote can be recorded in the event as it is now.

        Raises:
            VotingEventNotOpenError: If the event is not open.
            StaleRoundError: If a vote is for a round other than the current one.
            TechnologyNotPresentError: If a technology is not in the event.
            TechnologyNotEligibleError: If a technology is not voted on in
                the current round.
        """
        if not self.is_open:
            raise VotingEventNotOpenError(
                self.id, self.effective_status.value, operation
            )
        current_round = self.round or 1
        for vote in votes:
            if vote.event_round != current_round:
                raise StaleRoundError(
                    self.id,
                    expected_round=vote.event_round,
                    current_round=current_round,
                    operation=operation,
                )
            technology = self.technology(vote.technology.id)
            if not technology.is_eligible_in_round(current_round):
                raise TechnologyNotEligibleError(
                    self.id, technology.id, current_round
                )

    def with_blips(self, blips: Iterable[Blip]) -> VotingEvent:
        """Store a blip snapshot and copy its revote flags onto technologies."""
        snapshot = tuple(blips)
        revote = {blip.technology_name: blip.for_revote for blip in snapshot}
        technologies = tuple(
            tech.with_for_revote(revote[tech.name]) if tech.name in revote else tech
            for tech in self.technologies
        )
        return replace(self, blips=snapshot, technologies=technologies)

    def with_winner(self, winner: VoterIdentity) -> VotingEvent:
        return replace(self, winner=winner)

    def with_technologies(self, technologies: Iterable[Technology]) -> VotingEvent:
        return replace(self, technologies=tuple(technologies))

    def find_technology(self, technology_id: str) -> Technology | None:
        return next((t for t in self.technologies if t.id == technology_id), None)

    def find_technology_by_name(self, name: str) -> Technology | None:
        return next((t for t in self.technologies if t.name == name), None)

    def technology(self, technology_id: str) -> Technology:
        """Return a technology by id.

        Raises:
            TechnologyNotPresentError: If the event has no such technology.
        """
        tech = self.find_technology(technology_id)
        if tech is None:
            raise TechnologyNotPresentError(self.id, technology_id)
        return tech

    def technology_named(self, name: str) -> Technology:
        tech = self.find_technology_by_name(name)
        if tech is None:
            raise TechnologyNotPresentError(self.id, name)
        return tech

    def with_technology(self, updated: Technology) -> VotingEvent:
        """Replace the technology that has the same id."""
        if self.find_technology(updated.id) is None:
            raise TechnologyNotPresentError(self.id, updated.id)
        return replace(
            self,
            technologies=tuple(
                updated if t.id == updated.id else t for t in self.technologies
            ),
        )

    def with_added_technology(self, technology: Technology) -> VotingEvent:
        """Append a technology, rejecting a duplicate name.

        Raises:
            TechnologyAlreadyPresentError: If the name is already used.
        """
        if self.find_technology_by_name(technology.name) is not None:
            raise TechnologyAlreadyPresentError(self.id, technology.name)
        if self.find_technology(technology.id) is not None:
            technology = replace(technology, id=new_id())
        return replace(self, technologies=(*self.technologies, technology))

    def to_dict(self, full: bool = True) -> dict[str, Any]:
        """Serialize the event.

        Args:
            full: When False, technologies and blips are left out.
        """
        doc: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "status": self.effective_status.value,
            "round": self.round,
            "open_for_revote": self.open_for_revote,
            "winner": self.winner.to_dict() if self.winner else None,
            "cancelled": self.cancelled,
            "initiative_name": self.initiative_name,
            "created_at": self.created_at.isoformat(),
            "last_opened_at": _iso(self.last_opened_at),
            "last_closed_at": _iso(self.last_closed_at),
            "version": self.version,
        }
        if full:
            doc["technologies"] = [t.to_dict() for t in self.technologies]
            doc["blips"] = (
                [b.to_dict() for b in self.blips] if self.blips is not None else None
            )
        return doc

    def to_document(self) -> dict[str, Any]:
        """Storage representation; keeps the stored status, not the effective one."""
        doc = self.to_dict(full=True)
        doc["status"] = self.status.value
        return doc

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VotingEvent:
        status = VotingEventStatus(data.get("status", "proposed"))
        cancelled = bool(data.get("cancelled", False))
        if status == VotingEventStatus.CANCELLED:
            # to_dict() output; the stored status is not recoverable.
            status, cancelled = VotingEventStatus.CLOSED, True
        winner = data.get("winner")
        blips = data.get("blips")
        return cls(
            id=data["id"],
            name=data["name"],
            status=status,
            round=data.get("round"),
            open_for_revote=data.get("open_for_revote"),
            technologies=tuple(
                Technology.from_dict(t) for t in data.get("technologies") or ()
            ),
            blips=(
                tuple(Blip.from_dict(b) for b in blips) if blips is not None else None
            ),
            winner=VoterIdentity.from_dict(winner) if winner else None,
            cancelled=cancelled,
            initiative_name=data.get("initiative_name"),
            created_at=_from_iso(data.get("created_at")) or _utc_now(),
            last_opened_at=_from_iso(data.get("last_opened_at")),
            last_closed_at=_from_iso(data.get("last_closed_at")),
            version=int(data.get("version", 0)),
        )
