"""Tally and blip value objects.

A tally counts, for one technology, how many votes went to each ring and
to each tag. A blip is the resolved verdict derived from a tally: the
winning ring, the vote breakdown, and whether the technology needs a
revote. Blips are derived from votes; an event only keeps the snapshot of
the last calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tech_radar.domain.models.ring import Ring


@dataclass(frozen=True, eq=True)
class RingCount:
    """Number of votes a ring received."""

    ring: Ring
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"ring": self.ring.value, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RingCount:
        return cls(ring=Ring.parse(data["ring"]), count=int(data["count"]))


@dataclass(frozen=True, eq=True)
class TagCount:
    """Number of votes carrying a tag."""

    tag: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"tag": self.tag, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TagCount:
        return cls(tag=data["tag"], count=int(data["count"]))


@dataclass(frozen=True, eq=True)
class TechnologyTally:
    """Ring and tag counts for one technology.

    Attributes:
        technology_id: Id of the technology the votes refer to.
        technology_name: Name of the technology.
        votes_for_ring: (ring, count) pairs, descending by count. Equal
            counts keep the order in which the rings were first seen.
        votes_for_tag: (tag, count) pairs ordered the same way, or None
            when no vote carried a tag.
    """

    technology_id: str
    technology_name: str
    votes_for_ring: tuple[RingCount, ...]
    votes_for_tag: tuple[TagCount, ...] | None = None

    @property
    def number_of_votes(self) -> int:
        return sum(rc.count for rc in self.votes_for_ring)

    @property
    def is_contested(self) -> bool:
        """True when the highest count is shared by two or more rings."""
        return (
            len(self.votes_for_ring) >= 2
            and self.votes_for_ring[0].count == self.votes_for_ring[1].count
        )


@dataclass(frozen=True, eq=True)
class VotingResult:
    """Tally frozen into a technology when the event moves to its next step.

    Attributes:
        round: Round whose votes produced the tally.
        votes_for_ring: Ring counts, descending.
        votes_for_tag: Tag counts, descending, or None without tags.
        for_revote: Whether the tally ended in a tie at the top.
    """

    round: int
    votes_for_ring: tuple[RingCount, ...]
    votes_for_tag: tuple[TagCount, ...] | None = None
    for_revote: bool = False

    @classmethod
    def from_tally(cls, tally: TechnologyTally, round_number: int) -> VotingResult:
        return cls(
            round=round_number,
            votes_for_ring=tally.votes_for_ring,
            votes_for_tag=tally.votes_for_tag,
            for_revote=tally.is_contested,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "votes_for_ring": [rc.to_dict() for rc in self.votes_for_ring],
            "votes_for_tag": (
                [tc.to_dict() for tc in self.votes_for_tag]
                if self.votes_for_tag is not None
                else None
            ),
            "for_revote": self.for_revote,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VotingResult:
        tags = data.get("votes_for_tag")
        return cls(
            round=int(data["round"]),
            votes_for_ring=tuple(
                RingCount.from_dict(d) for d in data["votes_for_ring"]
            ),
            votes_for_tag=(
                tuple(TagCount.from_dict(d) for d in tags) if tags is not None else None
            ),
            for_revote=bool(data.get("for_revote", False)),
        )


@dataclass(frozen=True, eq=True)
class Blip:
    """Resolved radar verdict for one technology.

    Attributes:
        technology_name: Name of the technology.
        ring: Winning ring (first ring with the highest count).
        number_of_votes: Total votes; equals the sum of the breakdown.
        votes: Breakdown of (ring, count) pairs, descending by count.
        for_revote: True when the top two counts are equal.
        quadrant: Quadrant of the technology, when known.
        is_new: Whether the technology is new on the radar.
    """

    technology_name: str
    ring: Ring
    number_of_votes: int
    votes: tuple[RingCount, ...]
    for_revote: bool = False
    quadrant: str | None = None
    is_new: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "technology_name": self.technology_name,
            "ring": self.ring.value,
            "number_of_votes": self.number_of_votes,
            "votes": [rc.to_dict() for rc in self.votes],
            "for_revote": self.for_revote,
            "quadrant": self.quadrant,
            "is_new": self.is_new,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Blip:
        return cls(
            technology_name=data["technology_name"],
            ring=Ring.parse(data["ring"]),
            number_of_votes=int(data["number_of_votes"]),
            votes=tuple(RingCount.from_dict(d) for d in data["votes"]),
            for_revote=bool(data.get("for_revote", False)),
            quadrant=data.get("quadrant"),
            is_new=bool(data.get("is_new", False)),
        )
