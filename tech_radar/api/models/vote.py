"""Vote API request/response models."""

from pydantic import BaseModel, Field, field_validator, model_validator

from tech_radar.api.models.common import (
    CommentResponse,
    DateTimeWithZ,
    RingCountResponse,
    RingEnum,
    TagCountResponse,
    normalize_ring,
)
from tech_radar.api.models.voting_event import VoterResponse
from tech_radar.application.services.vote_service import VoteRequest
from tech_radar.domain.models.blip import TechnologyTally
from tech_radar.domain.models.vote import Vote, VoterIdentity


class VoterRequest(BaseModel):
    first_name: str = Field(default="", max_length=255)
    last_name: str = Field(default="", max_length=255)

    @model_validator(mode="after")
    def has_a_name(self) -> "VoterRequest":
        if not self.first_name.strip() and not self.last_name.strip():
            raise ValueError("voter must have a first or last name")
        return self

    def to_domain(self) -> VoterIdentity:
        return VoterIdentity(first_name=self.first_name, last_name=self.last_name)


class VoteEntryRequest(BaseModel):
    """One ballot entry: the ring chosen for one technology."""

    technology_id: str = Field(..., min_length=1, max_length=64)
    ring: RingEnum
    tags: list[str] = Field(default_factory=list, max_length=50)
    comment: str | None = Field(default=None, max_length=10_000)
    comment_author: str | None = Field(default=None, max_length=255)
    event_round: int | None = Field(default=None, ge=1)

    @field_validator("ring", mode="before")
    @classmethod
    def ring_any_case(cls, v: object) -> object:
        return normalize_ring(v)

    def to_domain(self) -> VoteRequest:
        return VoteRequest(
            technology_id=self.technology_id,
            ring=self.ring.to_domain(),
            tags=tuple(self.tags),
            comment=self.comment,
            comment_author=self.comment_author,
            event_round=self.event_round,
        )


class SaveVotesRequest(BaseModel):
    """A voter's ballot for one voting event."""

    voting_event_id: str = Field(..., min_length=1)
    voter: VoterRequest
    votes: list[VoteEntryRequest] = Field(..., min_length=1)


class VoteReplyRequest(BaseModel):
    target_comment_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=10_000)
    author: str | None = Field(default=None, max_length=255)


class VoteResponse(BaseModel):
    id: str
    voting_event_id: str
    event_round: int
    technology_id: str
    technology_name: str
    quadrant: str
    is_new: bool
    ring: RingEnum
    voter: VoterResponse
    tags: list[str]
    comments: list[CommentResponse]
    timestamp: DateTimeWithZ
    version: int

    @classmethod
    def from_domain(cls, vote: Vote) -> "VoteResponse":
        return cls(
            id=vote.id,
            voting_event_id=vote.event_id,
            event_round=vote.event_round,
            technology_id=vote.technology.id,
            technology_name=vote.technology.name,
            quadrant=vote.technology.quadrant,
            is_new=vote.technology.is_new,
            ring=RingEnum(vote.ring.value),
            voter=VoterResponse.from_domain(vote.voter),
            tags=list(vote.tags),
            comments=CommentResponse.from_thread(vote.comment),
            timestamp=vote.timestamp,
            version=vote.version,
        )


class VoteReplyResponse(BaseModel):
    comment_id: str
    vote: VoteResponse


class HasVotedResponse(BaseModel):
    has_voted: bool


class TallyResponse(BaseModel):
    """Ring and tag counts for one technology."""

    technology_id: str
    technology_name: str
    number_of_votes: int
    votes_for_ring: list[RingCountResponse]
    votes_for_tag: list[TagCountResponse] | None = None
    for_revote: bool

    @classmethod
    def from_domain(cls, tally: TechnologyTally) -> "TallyResponse":
        return cls(
            technology_id=tally.technology_id,
            technology_name=tally.technology_name,
            number_of_votes=tally.number_of_votes,
            votes_for_ring=[
                RingCountResponse.from_domain(rc) for rc in tally.votes_for_ring
            ],
            votes_for_tag=(
                [TagCountResponse.from_domain(tc) for tc in tally.votes_for_tag]
                if tally.votes_for_tag is not None
                else None
            ),
            for_revote=tally.is_contested,
        )


class DeleteVotesResponse(BaseModel):
    deleted: int
