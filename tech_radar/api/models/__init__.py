"""
API models (Pydantic DTOs) for Tech Radar.

This module contains all Pydantic request/response models
used by API endpoints.
"""

from tech_radar.api.models.common import CommentRequest, ErrorResponse, RingEnum
from tech_radar.api.models.health import HealthResponse
from tech_radar.api.models.vote import SaveVotesRequest, VoteResponse
from tech_radar.api.models.voting_event import (
    CreateVotingEventRequest,
    VotingEventResponse,
)

__all__: list[str] = [
    "CommentRequest",
    "CreateVotingEventRequest",
    "ErrorResponse",
    "HealthResponse",
    "RingEnum",
    "SaveVotesRequest",
    "VoteResponse",
    "VotingEventResponse",
]
