"""RFC 7807 problem responses for radar errors.

Every RadarError raised by a service reaches the client as a problem
document wrapped in ``detail``, the same body shape HTTPException uses:

    {"detail": {"type": "urn:tech-radar:error:duplicate-vote",
                "title": "Duplicate Vote", "status": 409, ...}}

Error attributes (current_author, expected_round, ...) are copied into
the document as extension members.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tech_radar.domain.errors import (
    CommentTargetNotFoundError,
    ConcurrentModificationError,
    DuplicateEventNameError,
    DuplicateVoteError,
    EventNotFoundError,
    InitiativeNotFoundError,
    InvalidStateTransitionError,
    OperationTimeoutError,
    RecommendationAuthorAlreadySetError,
    RecommendationAuthorDifferentError,
    StaleRoundError,
    StoreUnavailableError,
    TechnologyAlreadyPresentError,
    TechnologyNotEligibleError,
    TechnologyNotPresentError,
    VoteNotFoundError,
    VotingEventNotOpenError,
)
from tech_radar.domain.exceptions import RadarError

logger = structlog.get_logger()

URN_PREFIX = "urn:tech-radar:error:"

# Most specific class first: StaleRoundError is a ConcurrentModificationError.
ERROR_STATUS: list[tuple[type[RadarError], int, str]] = [
    (EventNotFoundError, 404, "event-not-found"),
    (InitiativeNotFoundError, 404, "initiative-not-found"),
    (VoteNotFoundError, 404, "vote-not-found"),
    (TechnologyNotPresentError, 404, "technology-not-present"),
    (CommentTargetNotFoundError, 404, "comment-target-not-found"),
    (DuplicateEventNameError, 409, "duplicate-event-name"),
    (DuplicateVoteError, 409, "duplicate-vote"),
    (TechnologyAlreadyPresentError, 409, "technology-already-present"),
    (RecommendationAuthorAlreadySetError, 409, "recommendation-author-already-set"),
    (RecommendationAuthorDifferentError, 409, "recommendation-author-different"),
    (InvalidStateTransitionError, 409, "invalid-state-transition"),
    (VotingEventNotOpenError, 409, "voting-event-not-open"),
    (TechnologyNotEligibleError, 409, "technology-not-eligible"),
    (StaleRoundError, 409, "stale-round"),
    (ConcurrentModificationError, 409, "concurrent-modification"),
    (OperationTimeoutError, 504, "timeout"),
    (StoreUnavailableError, 503, "store-unavailable"),
]


def _classify(exc: RadarError) -> tuple[int, str]:
    for error_type, status, slug in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status, slug
    return 500, "internal"


def _title(slug: str) -> str:
    return " ".join(part.capitalize() for part in slug.split("-"))


def problem(
    request: Request,
    status: int,
    slug: str,
    detail: str,
    **extensions: Any,
) -> dict[str, Any]:
    """Build an RFC 7807 problem document."""
    body: dict[str, Any] = {
        "type": f"{URN_PREFIX}{slug}",
        "title": _title(slug),
        "status": status,
        "detail": detail,
        "instance": str(request.url),
    }
    body.update(extensions)
    return body


PROBLEM_MEMBERS = frozenset({"type", "title", "status", "detail", "instance"})


def _extensions(exc: RadarError) -> dict[str, Any]:
    # VotingEventNotOpenError.status would shadow the HTTP status.
    return {
        (f"error_{name}" if name in PROBLEM_MEMBERS else name): value
        for name, value in vars(exc).items()
        if not name.startswith("_")
    }


async def radar_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RadarError)
    status, slug = _classify(exc)
    log = logger.bind(path=request.url.path, error_type=type(exc).__name__)
    if status >= 500:
        log.error("request_failed", status=status, detail=str(exc))
    else:
        log.info("request_rejected", status=status)
    body = problem(request, status, slug, str(exc), **_extensions(exc))
    return JSONResponse(
        status_code=status, content={"detail": jsonable_encoder(body)}
    )


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    body = problem(
        request,
        400,
        "validation",
        "Request validation failed",
        errors=jsonable_encoder(exc.errors()),
    )
    return JSONResponse(status_code=400, content={"detail": body})


def register_error_handlers(app: FastAPI) -> None:
    """Install the radar and validation error handlers on an app."""
    app.add_exception_handler(RadarError, radar_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
