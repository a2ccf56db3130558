"""Shared API model pieces: ring enum, datetime serialization, comments."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

from tech_radar.domain.models.blip import RingCount, TagCount
from tech_radar.domain.models.comment import CommentThread
from tech_radar.domain.models.ring import Ring

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class RingEnum(str, Enum):
    """Radar rings accepted by the API."""

    ADOPT = "adopt"
    TRIAL = "trial"
    ASSESS = "assess"
    HOLD = "hold"

    def to_domain(self) -> Ring:
        return Ring(self.value)


def normalize_ring(value: object) -> object:
    """Before-validator accepting rings in any case."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class CommentResponse(BaseModel):
    """A comment with its replies nested to any depth."""

    id: str
    text: str
    author: str | None = None
    timestamp: datetime
    replies: list["CommentResponse"] | None = None

    @classmethod
    def from_thread(cls, thread: CommentThread) -> list["CommentResponse"]:
        return [cls.model_validate(doc) for doc in thread.to_nested()]


CommentResponse.model_rebuild()


class CommentRequest(BaseModel):
    """Request body for a new comment or reply."""

    text: str = Field(..., min_length=1, max_length=10_000)
    author: str | None = Field(default=None, max_length=255)


class RingCountResponse(BaseModel):
    ring: RingEnum
    count: int

    @classmethod
    def from_domain(cls, rc: RingCount) -> "RingCountResponse":
        return cls(ring=RingEnum(rc.ring.value), count=rc.count)


class TagCountResponse(BaseModel):
    tag: str
    count: int

    @classmethod
    def from_domain(cls, tc: TagCount) -> "TagCountResponse":
        return cls(tag=tc.tag, count=tc.count)


class ErrorResponse(BaseModel):
    """RFC 7807 problem document.

    Attributes:
        type: URN identifying the error kind.
        title: Short summary of the error kind.
        status: HTTP status code.
        detail: Explanation specific to this occurrence.
        instance: URL of the request.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
