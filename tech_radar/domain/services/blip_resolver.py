"""Blip resolver.

Turns tallies into blips: the winning ring per technology, the vote
breakdown, and the revote flag. A technology is flagged for revote when
its highest ring count is shared by two or more rings.
"""

from __future__ import annotations

from collections.abc import Iterable

from tech_radar.domain.models.blip import Blip, TechnologyTally
from tech_radar.domain.models.vote import TechnologyRef, Vote
from tech_radar.domain.services.tally import tally_votes


def resolve_blip(
    tally: TechnologyTally,
    quadrant: str | None = None,
    is_new: bool = False,
) -> Blip:
    """Resolve one tally into a blip.

    The winner is the first ring of the tally, which is the ring with the
    highest count, ties going to the ring voted first.

    Raises:
        ValueError: If the tally has no votes.
    """
    if not tally.votes_for_ring:
        raise ValueError(f"No votes to resolve for {tally.technology_name}")
    return Blip(
        technology_name=tally.technology_name,
        ring=tally.votes_for_ring[0].ring,
        number_of_votes=tally.number_of_votes,
        votes=tally.votes_for_ring,
        for_revote=tally.is_contested,
        quadrant=quadrant,
        is_new=is_new,
    )


def _resolve(
    votes: list[Vote],
    tallies: list[TechnologyTally],
    by_name: bool,
) -> list[Blip]:
    refs: dict[str, TechnologyRef] = {}
    for vote in votes:
        group = vote.technology.name if by_name else vote.technology.id
        refs.setdefault(group, vote.technology)
    blips = []
    for tally in tallies:
        ref = refs[tally.technology_name if by_name else tally.technology_id]
        blips.append(
            resolve_blip(tally, quadrant=ref.quadrant or None, is_new=ref.is_new)
        )
    return blips


def resolve_blips(votes: Iterable[Vote], round_number: int | None = None) -> list[Blip]:
    """Blips of one event's votes, in order of first appearance.

    Technologies without votes produce no blip.
    """
    votes = list(votes)
    return _resolve(votes, tally_votes(votes, round_number), by_name=False)


def resolve_blips_across_events(votes: Iterable[Vote]) -> list[Blip]:
    """Blips over votes from several events.

    Technologies with the same name are treated as one, whatever their id
    in each event.
    """
    votes = list(votes)
    tallies = tally_votes(votes, key=lambda vote: vote.technology.name)
    return _resolve(votes, tallies, by_name=True)
