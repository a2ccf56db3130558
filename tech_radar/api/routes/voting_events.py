"""Voting event API routes.

FastAPI router for the voting event lifecycle: creation, opening and
closing, cancellation, revote rounds, flow steps, technologies, their
comments, recommendations, blips and the winner draw.

Errors raised by the services are turned into RFC 7807 problem responses
by the handlers in tech_radar.api.errors.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from tech_radar.api.dependencies.radar import (
    get_acting_user,
    get_blip_service,
    get_comment_service,
    get_recommendation_service,
    get_voting_event_service,
)
from tech_radar.api.errors import problem
from tech_radar.api.models.common import CommentRequest, ErrorResponse
from tech_radar.api.models.voting_event import (
    BlipResponse,
    CommentCreatedResponse,
    CreateVotingEventRequest,
    RecommendationAuthorRequest,
    RecommendationRequest,
    ResetRecommendationRequest,
    RevoteRequest,
    SetTechnologiesRequest,
    TechnologyRequest,
    VoterResponse,
    VotingEventActivityResponse,
    VotingEventResponse,
    WinnerResponse,
)
from tech_radar.application.services import (
    BlipService,
    CommentService,
    RecommendationService,
    VotingEventService,
)

router = APIRouter(prefix="/v1/voting-events", tags=["voting-events"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Voting event not found"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Conflicting state"}}


def _require_identity(
    request: Request, acting_user: str | None, claimed: str | None, field: str
) -> str:
    """Token user first, then the name given in the body."""
    identity = acting_user or (claimed.strip() if claimed else None)
    if not identity:
        raise HTTPException(
            status_code=400,
            detail=problem(
                request,
                400,
                "missing-identity",
                f"Provide a bearer token or a {field} in the body",
            ),
        )
    return identity


# =============================================================================
# Lifecycle
# =============================================================================


@router.post(
    "",
    response_model=VotingEventResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse, "description": "Name already used"}},
    summary="Create a voting event",
)
async def create_voting_event(
    body: CreateVotingEventRequest,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.create_voting_event(
        body.name, initiative_name=body.initiative_name
    )
    return VotingEventResponse.from_domain(event)


@router.get(
    "",
    response_model=list[VotingEventResponse],
    summary="List voting events that are not cancelled",
)
async def list_voting_events(
    full: bool = Query(default=False, description="Include technologies and blips"),
    service: VotingEventService = Depends(get_voting_event_service),
) -> list[VotingEventResponse]:
    events = await service.get_voting_events(full=full)
    return [VotingEventResponse.from_domain(event, full=full) for event in events]


@router.get(
    "/{event_id}",
    response_model=VotingEventResponse,
    responses=_NOT_FOUND,
)
async def get_voting_event(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    return VotingEventResponse.from_domain(await service.get_voting_event(event_id))


@router.post(
    "/{event_id}/open",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
    summary="Open the event for voting",
)
async def open_voting_event(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    return VotingEventResponse.from_domain(await service.open_voting_event(event_id))


@router.post(
    "/{event_id}/close",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def close_voting_event(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    return VotingEventResponse.from_domain(await service.close_voting_event(event_id))


@router.post(
    "/{event_id}/cancel",
    status_code=204,
    responses=_NOT_FOUND,
    summary="Cancel an event; hard=true deletes it with its votes",
)
async def cancel_voting_event(
    event_id: str,
    hard: bool = Query(default=False),
    service: VotingEventService = Depends(get_voting_event_service),
) -> Response:
    await service.cancel_voting_event(event_id, hard=hard)
    return Response(status_code=204)


@router.post(
    "/{event_id}/undo-cancel",
    response_model=VotingEventResponse,
    responses=_NOT_FOUND,
)
async def undo_cancel_voting_event(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.undo_cancel_voting_event(event_id)
    return VotingEventResponse.from_domain(event)


@router.post(
    "/{event_id}/revote/open",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def open_for_revote(
    event_id: str,
    body: RevoteRequest,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.open_for_revote(event_id, round_number=body.round)
    return VotingEventResponse.from_domain(event)


@router.post(
    "/{event_id}/revote/close",
    response_model=VotingEventResponse,
    responses=_NOT_FOUND,
)
async def close_for_revote(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    return VotingEventResponse.from_domain(await service.close_for_revote(event_id))


@router.post(
    "/{event_id}/next-flow-step",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
    summary="Freeze the tallies of the round and advance to the next one",
)
async def move_to_next_flow_step(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.move_to_next_flow_step(event_id)
    return VotingEventResponse.from_domain(event)


# =============================================================================
# Technologies and comments
# =============================================================================


@router.post(
    "/{event_id}/technologies",
    response_model=VotingEventResponse,
    status_code=201,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def add_new_technology(
    event_id: str,
    body: TechnologyRequest,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.add_new_technology(event_id, body.to_domain())
    return VotingEventResponse.from_domain(event)


@router.put(
    "/{event_id}/technologies",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def set_technologies(
    event_id: str,
    body: SetTechnologiesRequest,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventResponse:
    event = await service.set_technologies(
        event_id, [tech.to_domain() for tech in body.technologies]
    )
    return VotingEventResponse.from_domain(event)


@router.post(
    "/{event_id}/technologies/{technology_id}/comments",
    response_model=CommentCreatedResponse,
    status_code=201,
    responses=_NOT_FOUND,
)
async def add_comment_to_technology(
    event_id: str,
    technology_id: str,
    body: CommentRequest,
    service: CommentService = Depends(get_comment_service),
) -> CommentCreatedResponse:
    event, comment_id = await service.add_comment_to_technology(
        event_id, technology_id, body.text, body.author
    )
    return CommentCreatedResponse(
        comment_id=comment_id, voting_event=VotingEventResponse.from_domain(event)
    )


@router.post(
    "/{event_id}/technologies/{technology_id}/comments/{comment_id}/replies",
    response_model=CommentCreatedResponse,
    status_code=201,
    responses=_NOT_FOUND,
)
async def add_reply_to_technology_comment(
    event_id: str,
    technology_id: str,
    comment_id: str,
    body: CommentRequest,
    service: CommentService = Depends(get_comment_service),
) -> CommentCreatedResponse:
    event, reply_id = await service.add_reply_to_technology_comment(
        event_id, technology_id, comment_id, body.text, body.author
    )
    return CommentCreatedResponse(
        comment_id=reply_id, voting_event=VotingEventResponse.from_domain(event)
    )


# =============================================================================
# Recommendations
# =============================================================================


@router.put(
    "/{event_id}/recommendation-author",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
    summary="Claim the recommendation of a technology",
)
async def set_recommendation_author(
    event_id: str,
    body: RecommendationAuthorRequest,
    request: Request,
    acting_user: str | None = Depends(get_acting_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> VotingEventResponse:
    author = _require_identity(request, acting_user, body.author, "author")
    event = await service.set_recommendation_author(
        event_id, body.technology_name, author
    )
    return VotingEventResponse.from_domain(event)


@router.put(
    "/{event_id}/recommendation",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def set_recommendation(
    event_id: str,
    body: RecommendationRequest,
    request: Request,
    acting_user: str | None = Depends(get_acting_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> VotingEventResponse:
    author = _require_identity(request, acting_user, body.author, "author")
    event = await service.set_recommendation(
        event_id, body.technology_name, body.to_domain(author)
    )
    return VotingEventResponse.from_domain(event)


@router.post(
    "/{event_id}/recommendation/reset",
    response_model=VotingEventResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
)
async def reset_recommendation(
    event_id: str,
    body: ResetRecommendationRequest,
    request: Request,
    acting_user: str | None = Depends(get_acting_user),
    service: RecommendationService = Depends(get_recommendation_service),
) -> VotingEventResponse:
    requester = _require_identity(request, acting_user, body.requester, "requester")
    event = await service.reset_recommendation(
        event_id, body.technology_name, requester
    )
    return VotingEventResponse.from_domain(event)


# =============================================================================
# Results
# =============================================================================


@router.post(
    "/{event_id}/blips",
    response_model=list[BlipResponse],
    responses=_NOT_FOUND,
    summary="Resolve the blips of the event and store them on it",
)
async def calculate_blips(
    event_id: str,
    round: int | None = Query(default=None, ge=1),
    service: BlipService = Depends(get_blip_service),
) -> list[BlipResponse]:
    blips = await service.calculate_blips(event_id, event_round=round)
    return [BlipResponse.from_domain(blip) for blip in blips]


@router.post(
    "/{event_id}/winner",
    response_model=WinnerResponse,
    responses=_NOT_FOUND,
    summary="Draw a winner among the voters",
)
async def calculate_winner(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> WinnerResponse:
    winner = await service.calculate_winner(event_id)
    return WinnerResponse(
        winner=VoterResponse.from_domain(winner) if winner else None
    )


@router.get(
    "/{event_id}/activity",
    response_model=VotingEventActivityResponse,
    responses=_NOT_FOUND,
)
async def get_voting_event_with_activity(
    event_id: str,
    service: VotingEventService = Depends(get_voting_event_service),
) -> VotingEventActivityResponse:
    activity = await service.get_voting_event_with_activity(event_id)
    return VotingEventActivityResponse.from_domain(activity)
