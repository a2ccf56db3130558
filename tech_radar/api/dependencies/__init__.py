"""FastAPI dependencies for Tech Radar."""

from tech_radar.api.dependencies.radar import (
    get_acting_user,
    get_blip_service,
    get_comment_service,
    get_identity,
    get_recommendation_service,
    get_vote_service,
    get_voting_event_service,
)

__all__: list[str] = [
    "get_acting_user",
    "get_blip_service",
    "get_comment_service",
    "get_identity",
    "get_recommendation_service",
    "get_vote_service",
    "get_voting_event_service",
]
