"""Voting event API request/response models.

Pydantic models for the /v1/voting-events endpoints. Request models
validate and convert into domain objects; response models are built from
domain objects with from_domain().
"""

from pydantic import BaseModel, Field, field_validator

from tech_radar.api.models.common import (
    CommentResponse,
    DateTimeWithZ,
    RingCountResponse,
    RingEnum,
    TagCountResponse,
    normalize_ring,
)
from tech_radar.application.services.voting_event_service import VotingEventActivity
from tech_radar.domain.models.blip import Blip, VotingResult
from tech_radar.domain.models.technology import Recommendation, Technology
from tech_radar.domain.models.vote import VoterIdentity
from tech_radar.domain.models.voting_event import VotingEvent


class CreateVotingEventRequest(BaseModel):
    """Request body for creating a voting event."""

    name: str = Field(..., min_length=1, max_length=255)
    initiative_name: str | None = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class TechnologyRequest(BaseModel):
    """A technology to add to an event. The id is generated when omitted."""

    id: str | None = Field(default=None, max_length=64)
    name: str = Field(..., min_length=1, max_length=255, pattern=r"\S")
    quadrant: str = Field(default="", max_length=64)
    description: str = Field(default="", max_length=10_000)
    is_new: bool = False

    def to_domain(self) -> Technology:
        return Technology(
            id=self.id or "",
            name=self.name.strip(),
            quadrant=self.quadrant,
            description=self.description,
            is_new=self.is_new,
        )


class SetTechnologiesRequest(BaseModel):
    technologies: list[TechnologyRequest]


class RevoteRequest(BaseModel):
    """Round the caller wants to open the revote for."""

    round: int = Field(..., ge=1)


class RecommendationAuthorRequest(BaseModel):
    """Author claiming the lock; replaced by the token's user when present."""

    technology_name: str = Field(..., min_length=1, max_length=255)
    author: str | None = Field(default=None, max_length=255)


class RecommendationRequest(BaseModel):
    technology_name: str = Field(..., min_length=1, max_length=255)
    author: str | None = Field(default=None, max_length=255)
    text: str = Field(..., min_length=1, max_length=10_000)
    ring: RingEnum

    @field_validator("ring", mode="before")
    @classmethod
    def ring_any_case(cls, v: object) -> object:
        return normalize_ring(v)

    def to_domain(self, author: str) -> Recommendation:
        return Recommendation(
            author=author, text=self.text, ring=self.ring.to_domain()
        )


class ResetRecommendationRequest(BaseModel):
    technology_name: str = Field(..., min_length=1, max_length=255)
    requester: str | None = Field(default=None, max_length=255)


class VoterResponse(BaseModel):
    first_name: str
    last_name: str

    @classmethod
    def from_domain(cls, voter: VoterIdentity) -> "VoterResponse":
        return cls(first_name=voter.first_name, last_name=voter.last_name)


class VotingResultResponse(BaseModel):
    round: int
    votes_for_ring: list[RingCountResponse]
    votes_for_tag: list[TagCountResponse] | None = None
    for_revote: bool

    @classmethod
    def from_domain(cls, result: VotingResult) -> "VotingResultResponse":
        return cls(
            round=result.round,
            votes_for_ring=[
                RingCountResponse.from_domain(rc) for rc in result.votes_for_ring
            ],
            votes_for_tag=(
                [TagCountResponse.from_domain(tc) for tc in result.votes_for_tag]
                if result.votes_for_tag is not None
                else None
            ),
            for_revote=result.for_revote,
        )


class RecommendationResponse(BaseModel):
    author: str
    text: str
    ring: RingEnum
    timestamp: DateTimeWithZ

    @classmethod
    def from_domain(cls, rec: Recommendation) -> "RecommendationResponse":
        return cls(
            author=rec.author,
            text=rec.text,
            ring=RingEnum(rec.ring.value),
            timestamp=rec.timestamp,
        )


class TechnologyResponse(BaseModel):
    id: str
    name: str
    quadrant: str
    description: str
    is_new: bool
    comments: list[CommentResponse]
    recommendation_author: str | None = None
    recommendation: RecommendationResponse | None = None
    voting_result: VotingResultResponse | None = None
    for_revote: bool = False

    @classmethod
    def from_domain(cls, tech: Technology) -> "TechnologyResponse":
        return cls(
            id=tech.id,
            name=tech.name,
            quadrant=tech.quadrant,
            description=tech.description,
            is_new=tech.is_new,
            comments=CommentResponse.from_thread(tech.comments),
            recommendation_author=tech.recommendation_author,
            recommendation=(
                RecommendationResponse.from_domain(tech.recommendation)
                if tech.recommendation
                else None
            ),
            voting_result=(
                VotingResultResponse.from_domain(tech.voting_result)
                if tech.voting_result
                else None
            ),
            for_revote=tech.for_revote,
        )


class BlipResponse(BaseModel):
    technology_name: str
    ring: RingEnum
    number_of_votes: int
    votes: list[RingCountResponse]
    for_revote: bool
    quadrant: str | None = None
    is_new: bool = False

    @classmethod
    def from_domain(cls, blip: Blip) -> "BlipResponse":
        return cls(
            technology_name=blip.technology_name,
            ring=RingEnum(blip.ring.value),
            number_of_votes=blip.number_of_votes,
            votes=[RingCountResponse.from_domain(rc) for rc in blip.votes],
            for_revote=blip.for_revote,
            quadrant=blip.quadrant,
            is_new=blip.is_new,
        )


class VotingEventResponse(BaseModel):
    """A voting event.

    ``technologies`` and ``blips`` are None in lightweight listings.
    """

    id: str
    name: str
    status: str
    round: int | None = None
    open_for_revote: bool | None = None
    cancelled: bool
    initiative_name: str | None = None
    winner: VoterResponse | None = None
    created_at: DateTimeWithZ
    last_opened_at: DateTimeWithZ | None = None
    last_closed_at: DateTimeWithZ | None = None
    version: int
    technologies: list[TechnologyResponse] | None = None
    blips: list[BlipResponse] | None = None

    @classmethod
    def from_domain(
        cls, event: VotingEvent, full: bool = True
    ) -> "VotingEventResponse":
        return cls(
            id=event.id,
            name=event.name,
            status=event.effective_status.value,
            round=event.round,
            open_for_revote=event.open_for_revote,
            cancelled=event.cancelled,
            initiative_name=event.initiative_name,
            winner=VoterResponse.from_domain(event.winner) if event.winner else None,
            created_at=event.created_at,
            last_opened_at=event.last_opened_at,
            last_closed_at=event.last_closed_at,
            version=event.version,
            technologies=(
                [TechnologyResponse.from_domain(t) for t in event.technologies]
                if full
                else None
            ),
            blips=(
                [BlipResponse.from_domain(b) for b in event.blips]
                if full and event.blips is not None
                else None
            ),
        )


class CommentCreatedResponse(BaseModel):
    """Id of the created comment and the event after the change."""

    comment_id: str
    voting_event: VotingEventResponse


class TechnologyActivityResponse(BaseModel):
    technology_id: str
    technology_name: str
    number_of_votes: int
    number_of_comments: int


class VotingEventActivityResponse(BaseModel):
    voting_event: VotingEventResponse
    technologies: list[TechnologyActivityResponse]

    @classmethod
    def from_domain(
        cls, activity: VotingEventActivity
    ) -> "VotingEventActivityResponse":
        return cls(
            voting_event=VotingEventResponse.from_domain(activity.event),
            technologies=[
                TechnologyActivityResponse(
                    technology_id=a.technology.id,
                    technology_name=a.technology.name,
                    number_of_votes=a.number_of_votes,
                    number_of_comments=a.number_of_comments,
                )
                for a in activity.technologies
            ],
        )


class WinnerResponse(BaseModel):
    winner: VoterResponse | None = None
