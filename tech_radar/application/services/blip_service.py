"""Blip service.

Resolves blips from stored votes. Blips are always derived from the
votes; calculate_blips also keeps a snapshot of the result on the event,
with each technology's revote flag, so that readers of the event see the
outcome of the last calculation. The snapshot does not depend on the rest
of the event, so an unrelated write that lands while votes are read is
kept and the snapshot is laid over it.
"""

from __future__ import annotations

from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.base import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    EventStoreMixin,
)
from tech_radar.domain.models.blip import Blip
from tech_radar.domain.services.blip_resolver import (
    resolve_blips,
    resolve_blips_across_events,
)


class BlipService(EventStoreMixin):
    """Blip calculation for one event or across all events."""

    def __init__(
        self,
        vote_store: VoteStoreProtocol,
        event_store: VotingEventStoreProtocol,
        default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._vote_store = vote_store
        self._event_store = event_store
        self._init_logger(component="blip")
        self._init_store_calls(default_timeout)

    async def calculate_blips(
        self,
        event_id: str,
        event_round: int | None = None,
    ) -> list[Blip]:
        """Resolve and store the blips of an event.

        Args:
            event_id: Voting event.
            event_round: Only count votes of this round, when given.

        Returns:
            One blip per technology with votes, in order of first vote.
            Empty when nothing matched.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            ConcurrentModificationError: If the snapshot lost every write
                attempt to other writers.
        """
        log = self._log_operation(
            "calculate_blips", event_id=event_id, round=event_round
        )
        event = await self._get_event(event_id)
        votes = await self._call_store(
            "find_votes", self._vote_store.find(event_id=event_id)
        )
        blips = resolve_blips(votes, round_number=event_round)
        await self._reapply_event(event, lambda latest: latest.with_blips(blips))
        log.info(
            "blips_calculated",
            blips=len(blips),
            for_revote=sum(1 for blip in blips if blip.for_revote),
        )
        return blips

    async def calculate_blips_from_all_events(self) -> list[Blip]:
        """Blips over the votes of every non-cancelled event.

        Technologies with the same name in different events are merged.
        """
        log = self._log_operation("calculate_blips_from_all_events")
        events = await self._call_store(
            "list_events", self._event_store.list_all(full=False)
        )
        visible = {event.id for event in events}
        votes = await self._call_store("find_votes", self._vote_store.find())
        blips = resolve_blips_across_events(v for v in votes if v.event_id in visible)
        log.info("blips_calculated", events=len(visible), blips=len(blips))
        return blips
