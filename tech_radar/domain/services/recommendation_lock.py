"""Recommendation lock.

A technology's recommendation has a single owner. The first author to
claim it holds it until they reset it. Authors are compared as trimmed
strings; the caller's identity token plays no part here.

These functions only decide. The service stores the returned technology
with a compare-and-set on the event version, so two authors racing for
an unowned technology cannot both win.
"""

from __future__ import annotations

from tech_radar.domain.errors.recommendation import (
    RecommendationAuthorAlreadySetError,
    RecommendationAuthorDifferentError,
)
from tech_radar.domain.models.technology import Recommendation, Technology


def _same_author(current: str | None, other: str) -> bool:
    return current is not None and current.strip() == other.strip()


def claim_author(technology: Technology, requested_author: str) -> Technology:
    """Set the lock owner.

    Returns:
        The technology with the author set, or the same technology when
        the requester already owns the lock.

    Raises:
        RecommendationAuthorAlreadySetError: If someone else owns it.
    """
    current = technology.recommendation_author
    if current is None:
        return technology.with_recommendation(
            requested_author.strip(), technology.recommendation
        )
    if _same_author(current, requested_author):
        return technology
    raise RecommendationAuthorAlreadySetError(
        technology=technology.name,
        current_author=current,
        requested_author=requested_author,
    )


def apply_recommendation(
    technology: Technology,
    recommendation: Recommendation,
) -> Technology:
    """Write a recommendation, claiming the lock if nobody holds it.

    Raises:
        RecommendationAuthorDifferentError: If another author owns it.
    """
    current = technology.recommendation_author
    if current is not None and not _same_author(current, recommendation.author):
        raise RecommendationAuthorDifferentError(
            technology=technology.name,
            current_author=current,
            requested_by=recommendation.author,
        )
    author = current if current is not None else recommendation.author.strip()
    return technology.with_recommendation(author, recommendation)


def release(technology: Technology, requester: str) -> Technology:
    """Clear both the owner and the recommendation.

    Raises:
        RecommendationAuthorDifferentError: If the requester is not the
            owner, including when nobody owns the lock.
    """
    current = technology.recommendation_author
    if not _same_author(current, requester):
        raise RecommendationAuthorDifferentError(
            technology=technology.name,
            current_author=current,
            requested_by=requester,
        )
    return technology.with_recommendation(None, None)
