"""Tech Radar API dependencies.

Service getters hand routes the instances wired in
tech_radar.bootstrap.radar; tests replace them through
app.dependency_overrides.
"""

from fastapi import Depends, Header

from tech_radar.application.ports.identity_checker import IdentityCheckerProtocol
from tech_radar.application.services import (
    BlipService,
    CommentService,
    RecommendationService,
    VoteService,
    VotingEventService,
)
from tech_radar.bootstrap.radar import (
    build_blip_service,
    build_comment_service,
    build_recommendation_service,
    build_vote_service,
    build_voting_event_service,
    get_identity_checker,
)


def get_voting_event_service() -> VotingEventService:
    return build_voting_event_service()


def get_vote_service() -> VoteService:
    return build_vote_service()


def get_blip_service() -> BlipService:
    return build_blip_service()


def get_comment_service() -> CommentService:
    return build_comment_service()


def get_recommendation_service() -> RecommendationService:
    return build_recommendation_service()


def get_identity() -> IdentityCheckerProtocol:
    return get_identity_checker()


async def get_acting_user(
    authorization: str | None = Header(default=None),
    identity: IdentityCheckerProtocol = Depends(get_identity),
) -> str | None:
    """User id behind the bearer token, or None.

    A missing header, a non-bearer scheme, and an unknown token all yield
    None; recommendation routes then fall back to the name in the body.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return await identity.resolve_user(token.strip())
