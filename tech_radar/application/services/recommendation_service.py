"""Recommendation service.

Applies the recommendation lock to a technology of an event, addressed by
technology name. The lock decision is taken on the copy that was read and
written back with a compare-and-set on the event version. When the write
loses, the decision is taken again on the fresh copy: against an unrelated
write it simply goes through, against another author's claim it is
rejected with that author's lock, and against the same author's claim it
finds nothing left to do.
"""

from __future__ import annotations

from collections.abc import Callable

from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.base import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    EventStoreMixin,
)
from tech_radar.domain.exceptions import RadarError
from tech_radar.domain.models.technology import Recommendation, Technology
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.domain.services import recommendation_lock

LockDecision = Callable[[Technology], Technology]


class RecommendationService(EventStoreMixin):
    """Single-author recommendations on technologies."""

    def __init__(
        self,
        event_store: VotingEventStoreProtocol,
        default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._event_store = event_store
        self._init_logger(component="recommendation")
        self._init_store_calls(default_timeout)

    async def set_recommendation_author(
        self,
        event_id: str,
        technology_name: str,
        author: str,
    ) -> VotingEvent:
        """Claim the recommendation lock of a technology.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyNotPresentError: If no technology has that name.
            RecommendationAuthorAlreadySetError: If another author holds it.
        """
        return await self._apply(
            "set_recommendation_author",
            event_id,
            technology_name,
            lambda tech: recommendation_lock.claim_author(tech, author),
        )

    async def set_recommendation(
        self,
        event_id: str,
        technology_name: str,
        recommendation: Recommendation,
    ) -> VotingEvent:
        """Write the recommendation, claiming the lock if it is free.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyNotPresentError: If no technology has that name.
            RecommendationAuthorDifferentError: If another author holds it.
        """
        return await self._apply(
            "set_recommendation",
            event_id,
            technology_name,
            lambda tech: recommendation_lock.apply_recommendation(tech, recommendation),
        )

    async def reset_recommendation(
        self,
        event_id: str,
        technology_name: str,
        requester: str,
    ) -> VotingEvent:
        """Clear the author and the recommendation.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyNotPresentError: If no technology has that name.
            RecommendationAuthorDifferentError: If the requester is not the
                current author.
        """
        return await self._apply(
            "reset_recommendation",
            event_id,
            technology_name,
            lambda tech: recommendation_lock.release(tech, requester),
        )

    async def _apply(
        self,
        operation: str,
        event_id: str,
        technology_name: str,
        decide: LockDecision,
    ) -> VotingEvent:
        log = self._log_operation(
            operation, event_id=event_id, technology=technology_name
        )
        event = await self._get_event(event_id)

        def apply(current: VotingEvent) -> VotingEvent:
            technology = current.technology_named(technology_name)
            updated = decide(technology)
            if updated is technology:
                return current
            return current.with_technology(updated)

        try:
            stored = await self._reapply_event(event, apply)
        except RadarError as exc:
            log.warning("recommendation_rejected", reason=type(exc).__name__)
            raise
        log.info(
            "recommendation_applied",
            author=stored.technology_named(technology_name).recommendation_author,
            version=stored.version,
        )
        return stored
