"""Technology and recommendation domain models.

A Technology is owned by a voting event: the event snapshots the
initiative's technology list on first open and every later change goes
through the event document.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from tech_radar.domain.models.blip import VotingResult
from tech_radar.domain.models.comment import CommentThread
from tech_radar.domain.models.ring import Ring


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a fresh identifier for a technology, vote or comment."""
    return uuid4().hex


@dataclass(frozen=True, eq=True)
class Recommendation:
    """Editorial note attached to a technology.

    Attributes:
        author: Declared author; also the lock owner of the technology.
        text: Recommendation content.
        ring: Ring the author recommends.
        timestamp: When the recommendation was written (UTC).
    """

    author: str
    text: str
    ring: Ring
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "author": self.author,
            "text": self.text,
            "ring": self.ring.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Recommendation:
        return cls(
            author=data["author"],
            text=data["text"],
            ring=Ring.parse(data["ring"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass(frozen=True, eq=True)
class Technology:
    """A technology rated within a voting event.

    Attributes:
        id: Identifier, unique within the event.
        name: Display name; unique within the event.
        quadrant: Radar quadrant (e.g. "tools", "languages & frameworks").
        description: Free-form description.
        is_new: Whether the technology is new on the radar.
        comments: Technology-level comment thread.
        recommendation_author: Owner of the recommendation lock, if claimed.
        recommendation: Current recommendation, if any.
        voting_result: Tally frozen at the last flow step, if any.
        for_revote: Revote flag from the last blip calculation.
    """

    id: str
    name: str
    quadrant: str = ""
    description: str = ""
    is_new: bool = False
    comments: CommentThread = field(default_factory=CommentThread)
    recommendation_author: str | None = None
    recommendation: Recommendation | None = None
    voting_result: VotingResult | None = None
    for_revote: bool = False

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Technology name must not be empty")

    def with_comments(self, comments: CommentThread) -> Technology:
        return replace(self, comments=comments)

    def with_recommendation(
        self,
        author: str | None,
        recommendation: Recommendation | None,
    ) -> Technology:
        return replace(
            self, recommendation_author=author, recommendation=recommendation
        )

    def with_voting_result(self, result: VotingResult | None) -> Technology:
        return replace(self, voting_result=result)

    def with_for_revote(self, for_revote: bool) -> Technology:
        return replace(self, for_revote=for_revote)

    def is_eligible_in_round(self, round_number: int) -> bool:
        """Whether votes for this technology are accepted in a round.

        Every technology is eligible in the first round. Afterwards only
        technologies without a frozen result, or whose frozen result ended
        in a tie, are voted on again.
        """
        if round_number <= 1 or self.voting_result is None:
            return True
        return self.voting_result.for_revote

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quadrant": self.quadrant,
            "description": self.description,
            "is_new": self.is_new,
            "comments": self.comments.to_dict(),
            "recommendation_author": self.recommendation_author,
            "recommendation": (
                self.recommendation.to_dict() if self.recommendation else None
            ),
            "voting_result": (
                self.voting_result.to_dict() if self.voting_result else None
            ),
            "for_revote": self.for_revote,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Technology:
        recommendation = data.get("recommendation")
        voting_result = data.get("voting_result")
        return cls(
            id=data.get("id") or new_id(),
            name=data["name"],
            quadrant=data.get("quadrant") or "",
            description=data.get("description") or "",
            is_new=bool(data.get("is_new", False)),
            comments=CommentThread.from_dict(data.get("comments")),
            recommendation_author=data.get("recommendation_author"),
            recommendation=(
                Recommendation.from_dict(recommendation) if recommendation else None
            ),
            voting_result=(
                VotingResult.from_dict(voting_result) if voting_result else None
            ),
            for_revote=bool(data.get("for_revote", False)),
        )
