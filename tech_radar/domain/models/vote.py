"""Vote domain model.

A vote is one voter's ring assignment for one technology in one round of
a voting event. Votes are created once and never overwritten; the only
later change is a reply added to the vote's comment thread.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from tech_radar.domain.models.comment import CommentThread
from tech_radar.domain.models.ring import Ring


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class VoterIdentity:
    """Who cast a vote.

    Two identities are the same voter when their names match after
    trimming surrounding whitespace and ignoring case.
    """

    first_name: str
    last_name: str = ""

    def __post_init__(self) -> None:
        if not self.first_name.strip() and not self.last_name.strip():
            raise ValueError("Voter identity must have a name")

    def normalized_key(self) -> str:
        """Key used for equality and for the vote uniqueness constraint."""
        first = self.first_name.strip().casefold()
        last = self.last_name.strip().casefold()
        return f"{first}|{last}"

    def to_dict(self) -> dict[str, Any]:
        return {"first_name": self.first_name, "last_name": self.last_name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoterIdentity:
        return cls(first_name=data["first_name"], last_name=data.get("last_name", ""))


@dataclass(frozen=True, eq=True)
class TechnologyRef:
    """Copy of the technology fields a vote needs for aggregation."""

    id: str
    name: str
    quadrant: str = ""
    is_new: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quadrant": self.quadrant,
            "is_new": self.is_new,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TechnologyRef:
        return cls(
            id=data["id"],
            name=data["name"],
            quadrant=data.get("quadrant") or "",
            is_new=bool(data.get("is_new", False)),
        )


@dataclass(frozen=True, eq=True)
class Vote:
    """A single vote.

    Attributes:
        id: Unique vote identifier.
        event_id: Voting event the vote belongs to.
        event_round: Round of the event the vote was cast in.
        technology: The technology voted on.
        ring: Ring assigned by the voter.
        voter: Who voted.
        tags: Free-text tags, in the order given by the voter.
        comment: Comment thread; at most one top-level comment.
        timestamp: Creation time (UTC).
        version: Incremented on every stored update.
    """

    id: str
    event_id: str
    event_round: int
    technology: TechnologyRef
    ring: Ring
    voter: VoterIdentity
    tags: tuple[str, ...] = ()
    comment: CommentThread = field(default_factory=CommentThread)
    timestamp: datetime = field(default_factory=_utc_now)
    version: int = 0

    @property
    def voter_key(self) -> str:
        return self.voter.normalized_key()

    @property
    def unique_key(self) -> tuple[str, int, str, str]:
        """(event, round, technology, voter) tuple that must be unique."""
        return (self.event_id, self.event_round, self.technology.id, self.voter_key)

    def with_comment(self, comment: CommentThread) -> Vote:
        return replace(self, comment=comment)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "event_round": self.event_round,
            "technology": self.technology.to_dict(),
            "ring": self.ring.value,
            "voter": self.voter.to_dict(),
            "tags": list(self.tags),
            "comment": self.comment.to_dict(),
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Vote:
        return cls(
            id=data["id"],
            event_id=data["event_id"],
            event_round=int(data["event_round"]),
            technology=TechnologyRef.from_dict(data["technology"]),
            ring=Ring.parse(data["ring"]),
            voter=VoterIdentity.from_dict(data["voter"]),
            tags=tuple(data.get("tags") or ()),
            comment=CommentThread.from_dict(data.get("comment")),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            version=int(data.get("version", 0)),
        )
