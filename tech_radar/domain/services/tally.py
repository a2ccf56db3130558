"""Ring and tag tally.

Pure functions turning votes into per-technology counts. Ordering is
deterministic for a given vote order: technologies appear in the order of
their first vote, and rings or tags with equal counts keep the order in
which they were first encountered.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from tech_radar.domain.models.blip import RingCount, TagCount, TechnologyTally
from tech_radar.domain.models.ring import Ring
from tech_radar.domain.models.vote import Vote


def _by_technology_id(vote: Vote) -> str:
    return vote.technology.id


def _descending(counts: dict) -> list[tuple]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def tally_votes(
    votes: Iterable[Vote],
    round_number: int | None = None,
    key: Callable[[Vote], str] = _by_technology_id,
) -> list[TechnologyTally]:
    """Count rings and tags per technology.

    Args:
        votes: Votes in persisted order.
        round_number: Only count votes cast in this round, when given.
        key: Grouping key; technology id by default. Cross-event
            aggregation groups by technology name instead.

    Returns:
        One tally per technology with at least one counted vote, in the
        order the technologies first appear among the votes.
    """
    rings: dict[str, dict[Ring, int]] = {}
    tags: dict[str, dict[str, int]] = {}
    first_vote: dict[str, Vote] = {}

    for vote in votes:
        if round_number is not None and vote.event_round != round_number:
            continue
        group = key(vote)
        first_vote.setdefault(group, vote)
        ring_counts = rings.setdefault(group, {})
        ring_counts[vote.ring] = ring_counts.get(vote.ring, 0) + 1
        tag_counts = tags.setdefault(group, {})
        # a tag counts once per vote
        for tag in dict.fromkeys(vote.tags):
            tag_counts[tag] = tag_counts.get(tag, 0) + 1

    tallies = []
    for group, vote in first_vote.items():
        tag_counts = tags[group]
        tallies.append(
            TechnologyTally(
                technology_id=vote.technology.id,
                technology_name=vote.technology.name,
                votes_for_ring=tuple(
                    RingCount(ring=ring, count=count)
                    for ring, count in _descending(rings[group])
                ),
                votes_for_tag=(
                    tuple(
                        TagCount(tag=tag, count=count)
                        for tag, count in _descending(tag_counts)
                    )
                    if tag_counts
                    else None
                ),
            )
        )
    return tallies


def latest_round_tallies(
    votes: Iterable[Vote],
    up_to_round: int,
) -> dict[str, tuple[int, TechnologyTally]]:
    """Tally each technology on the most recent round it received votes in.

    Only rounds up to and including ``up_to_round`` are considered, so a
    technology that was not revoted keeps the tally of the round that
    decided it.

    Returns:
        Mapping of technology id to (round, tally).
    """
    by_round: dict[int, list[Vote]] = {}
    for vote in votes:
        if vote.event_round <= up_to_round:
            by_round.setdefault(vote.event_round, []).append(vote)

    latest: dict[str, tuple[int, TechnologyTally]] = {}
    for round_number in sorted(by_round):
        for tally in tally_votes(by_round[round_number]):
            latest[tally.technology_id] = (round_number, tally)
    return latest
