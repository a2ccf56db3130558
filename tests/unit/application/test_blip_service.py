"""Unit tests for BlipService."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from tech_radar.application.services import (
    BlipService,
    CommentService,
    VoteRequest,
    VoteService,
    VotingEventService,
)
from tech_radar.application.services.base import REAPPLY_ATTEMPTS
from tech_radar.domain.errors import ConcurrentModificationError
from tech_radar.domain.models import Ring, RingCount, VoterIdentity
from tech_radar.infrastructure.stubs import (
    TechnologyCatalogStub,
    VoteStoreStub,
    VotingEventStoreStub,
)

RUST = "tech-rust"
K8S = "tech-kubernetes"


class SlowVoteStore(VoteStoreStub):
    """Reads the votes, then answers after a short delay."""

    async def find(self, *args, **kwargs):
        votes = await super().find(*args, **kwargs)
        await asyncio.sleep(0.05)
        return votes


async def _open_event(service: VotingEventService, name: str = "Radar") -> str:
    event = await service.create_voting_event(name)
    await service.open_voting_event(event.id)
    return event.id


async def _vote(
    vote_service: VoteService, event_id: str, first_name: str, rust: Ring
) -> None:
    await vote_service.save_votes(
        event_id,
        VoterIdentity(first_name=first_name),
        [VoteRequest(RUST, rust), VoteRequest(K8S, Ring.ADOPT)],
    )


class TestCalculateBlips:
    """Tests for calculate_blips()."""

    async def test_resolves_and_snapshots(
        self,
        blip_service: BlipService,
        vote_service: VoteService,
        voting_event_service: VotingEventService,
        event_store: VotingEventStoreStub,
    ) -> None:
        event_id = await _open_event(voting_event_service)
        await _vote(vote_service, event_id, "Ann", Ring.HOLD)
        await _vote(vote_service, event_id, "Bob", Ring.TRIAL)

        blips = await blip_service.calculate_blips(event_id)

        rust, k8s = blips
        assert rust.technology_name == "Rust"
        assert rust.for_revote is True
        assert rust.ring == Ring.HOLD
        assert k8s.ring == Ring.ADOPT
        assert k8s.votes == (RingCount(Ring.ADOPT, 2),)
        stored = await event_store.get(event_id)
        assert stored.blips == tuple(blips)
        assert stored.technology(RUST).for_revote is True
        assert stored.technology(K8S).for_revote is False

    async def test_no_votes_gives_empty_list(
        self, blip_service: BlipService, voting_event_service: VotingEventService
    ) -> None:
        event_id = await _open_event(voting_event_service)

        assert await blip_service.calculate_blips(event_id) == []

    async def test_round_filter(
        self,
        blip_service: BlipService,
        vote_service: VoteService,
        voting_event_service: VotingEventService,
    ) -> None:
        event_id = await _open_event(voting_event_service)
        await _vote(vote_service, event_id, "Ann", Ring.HOLD)

        assert await blip_service.calculate_blips(event_id, event_round=2) == []

    async def test_comment_written_during_calculation_is_kept(
        self, catalog: TechnologyCatalogStub
    ) -> None:
        event_store = VotingEventStoreStub()
        vote_store = SlowVoteStore(event_store)
        events = VotingEventService(event_store, vote_store, catalog)
        votes = VoteService(vote_store, event_store)
        blips = BlipService(vote_store, event_store)
        comments = CommentService(event_store, vote_store)
        event_id = await _open_event(events)
        await _vote(votes, event_id, "Ann", Ring.HOLD)

        calculated, (_, comment_id) = await asyncio.gather(
            blips.calculate_blips(event_id),
            comments.add_comment_to_technology(event_id, RUST, "hi"),
        )

        stored = await event_store.get(event_id)
        assert [b.technology_name for b in calculated] == ["Rust", "Kubernetes"]
        assert stored.blips == tuple(calculated)
        assert comment_id in stored.technology(RUST).comments

    async def test_gives_up_after_repeated_conflicts(
        self,
        blip_service: BlipService,
        voting_event_service: VotingEventService,
        event_store: VotingEventStoreStub,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        event_id = await _open_event(voting_event_service)
        update = AsyncMock(side_effect=ConcurrentModificationError(event_id, 1))
        monkeypatch.setattr(event_store, "update_cas", update)

        with pytest.raises(ConcurrentModificationError):
            await blip_service.calculate_blips(event_id)

        assert update.await_count == REAPPLY_ATTEMPTS


class TestAcrossEvents:
    """Tests for calculate_blips_from_all_events()."""

    async def test_merges_by_name_and_skips_cancelled(
        self,
        blip_service: BlipService,
        vote_service: VoteService,
        voting_event_service: VotingEventService,
    ) -> None:
        first = await _open_event(voting_event_service, "Radar 1")
        second = await _open_event(voting_event_service, "Radar 2")
        dropped = await _open_event(voting_event_service, "Radar 3")
        await _vote(vote_service, first, "Ann", Ring.HOLD)
        await _vote(vote_service, second, "Ann", Ring.HOLD)
        await _vote(vote_service, dropped, "Ann", Ring.TRIAL)
        await voting_event_service.cancel_voting_event(dropped)

        blips = await blip_service.calculate_blips_from_all_events()

        rust = next(b for b in blips if b.technology_name == "Rust")
        assert rust.ring == Ring.HOLD
        assert rust.number_of_votes == 2
        assert rust.for_revote is False
