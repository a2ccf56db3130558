"""Application services."""

from tech_radar.application.services.blip_service import BlipService
from tech_radar.application.services.comment_service import CommentService
from tech_radar.application.services.recommendation_service import (
    RecommendationService,
)
from tech_radar.application.services.request_timeout import (
    current_timeout,
    request_timeout,
)
from tech_radar.application.services.vote_service import VoteRequest, VoteService
from tech_radar.application.services.voting_event_service import (
    TechnologyActivity,
    VotingEventActivity,
    VotingEventService,
)

__all__ = [
    "BlipService",
    "CommentService",
    "RecommendationService",
    "TechnologyActivity",
    "VoteRequest",
    "VoteService",
    "VotingEventActivity",
    "VotingEventService",
    "current_timeout",
    "request_timeout",
]
