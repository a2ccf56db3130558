"""Vote API routes.

Ballot submission, vote queries and tallies, replies to vote comments,
and blips across every voting event.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from tech_radar.api.dependencies.radar import (
    get_blip_service,
    get_comment_service,
    get_vote_service,
)
from tech_radar.api.models.common import CommentResponse, ErrorResponse
from tech_radar.api.models.vote import (
    DeleteVotesResponse,
    HasVotedResponse,
    SaveVotesRequest,
    TallyResponse,
    VoteReplyRequest,
    VoteReplyResponse,
    VoteResponse,
)
from tech_radar.api.models.voting_event import BlipResponse, VoterResponse
from tech_radar.application.services import BlipService, CommentService, VoteService
from tech_radar.domain.models.vote import VoterIdentity

router = APIRouter(prefix="/v1/votes", tags=["votes"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Not found"}}


@router.post(
    "",
    response_model=list[VoteResponse],
    status_code=201,
    responses={
        404: {"model": ErrorResponse, "description": "Event or technology missing"},
        409: {
            "model": ErrorResponse,
            "description": "Duplicate vote, stale round or event not open",
        },
    },
    summary="Submit a ballot",
)
async def save_votes(
    body: SaveVotesRequest,
    service: VoteService = Depends(get_vote_service),
) -> list[VoteResponse]:
    votes = await service.save_votes(
        body.voting_event_id,
        body.voter.to_domain(),
        [entry.to_domain() for entry in body.votes],
    )
    return [VoteResponse.from_domain(vote) for vote in votes]


@router.get("", response_model=list[VoteResponse])
async def get_votes(
    voting_event_id: str | None = Query(default=None),
    technology_id: str | None = Query(default=None),
    round: int | None = Query(default=None, ge=1),
    service: VoteService = Depends(get_vote_service),
) -> list[VoteResponse]:
    votes = await service.get_votes(
        event_id=voting_event_id, technology_id=technology_id, event_round=round
    )
    return [VoteResponse.from_domain(vote) for vote in votes]


@router.get(
    "/has-voted",
    response_model=HasVotedResponse,
    responses=_NOT_FOUND,
)
async def has_already_voted(
    voting_event_id: str = Query(...),
    first_name: str = Query(..., pattern=r"\S"),
    last_name: str = Query(default=""),
    round: int | None = Query(default=None, ge=1),
    service: VoteService = Depends(get_vote_service),
) -> HasVotedResponse:
    voter = VoterIdentity(first_name=first_name, last_name=last_name)
    has_voted = await service.has_already_voted(
        voting_event_id, voter, event_round=round
    )
    return HasVotedResponse(has_voted=has_voted)


@router.get("/aggregate", response_model=list[TallyResponse])
async def aggregate_votes(
    voting_event_id: str = Query(...),
    round: int | None = Query(default=None, ge=1),
    service: VoteService = Depends(get_vote_service),
) -> list[TallyResponse]:
    tallies = await service.aggregate_votes(voting_event_id, event_round=round)
    return [TallyResponse.from_domain(tally) for tally in tallies]


@router.get("/voters", response_model=list[VoterResponse])
async def get_voters(
    voting_event_id: str = Query(...),
    service: VoteService = Depends(get_vote_service),
) -> list[VoterResponse]:
    voters = await service.get_voters(voting_event_id)
    return [VoterResponse.from_domain(voter) for voter in voters]


@router.get("/blips", response_model=list[BlipResponse])
async def calculate_blips_from_all_events(
    service: BlipService = Depends(get_blip_service),
) -> list[BlipResponse]:
    blips = await service.calculate_blips_from_all_events()
    return [BlipResponse.from_domain(blip) for blip in blips]


@router.get(
    "/technologies/{technology_id}/comments",
    response_model=list[CommentResponse],
)
async def get_votes_comments_for_tech(
    technology_id: str,
    voting_event_id: str | None = Query(default=None),
    service: CommentService = Depends(get_comment_service),
) -> list[dict[str, Any]]:
    return await service.get_votes_comments_for_tech(technology_id, voting_event_id)


@router.get(
    "/technologies/{technology_id}/with-comments",
    response_model=list[VoteResponse],
)
async def get_votes_with_comments_for_tech(
    technology_id: str,
    voting_event_id: str | None = Query(default=None),
    service: CommentService = Depends(get_comment_service),
) -> list[VoteResponse]:
    votes = await service.get_votes_with_comments_for_tech(
        technology_id, voting_event_id
    )
    return [VoteResponse.from_domain(vote) for vote in votes]


@router.post(
    "/{vote_id}/comment/replies",
    response_model=VoteReplyResponse,
    status_code=201,
    responses={**_NOT_FOUND, 409: {"model": ErrorResponse}},
)
async def add_reply_to_vote_comment(
    vote_id: str,
    body: VoteReplyRequest,
    service: CommentService = Depends(get_comment_service),
) -> VoteReplyResponse:
    vote, reply_id = await service.add_reply_to_vote_comment(
        vote_id, body.target_comment_id, body.text, body.author
    )
    return VoteReplyResponse(comment_id=reply_id, vote=VoteResponse.from_domain(vote))


@router.delete("", response_model=DeleteVotesResponse)
async def delete_votes(
    voting_event_id: str = Query(...),
    service: VoteService = Depends(get_vote_service),
) -> DeleteVotesResponse:
    deleted = await service.delete_votes(voting_event_id)
    return DeleteVotesResponse(deleted=deleted)
