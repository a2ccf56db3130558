"""Unit tests for the ring and tag tally."""

from tech_radar.domain.models import Ring, RingCount, TagCount
from tech_radar.domain.services.tally import latest_round_tallies, tally_votes
from tests.helpers.builders import make_vote


def _eight_votes() -> list:
    return [
        make_vote("tech0", "hold", "Ann"),
        make_vote("tech0", "assess", "Bob"),
        make_vote("tech0", "hold", "Cid"),
        make_vote("tech1", "assess", "Ann"),
        make_vote("tech1", "assess", "Bob"),
        make_vote("tech1", "trial", "Cid"),
        make_vote("tech2", "adopt", "Ann"),
        make_vote("tech2", "adopt", "Bob"),
    ]


class TestTallyVotes:
    """Tests for tally_votes()."""

    def test_one_tally_per_technology_in_first_vote_order(self) -> None:
        tallies = tally_votes(_eight_votes())

        assert [t.technology_id for t in tallies] == ["tech0", "tech1", "tech2"]
        assert [t.number_of_votes for t in tallies] == [3, 3, 2]

    def test_rings_sorted_descending(self) -> None:
        tallies = tally_votes(_eight_votes())

        assert tallies[0].votes_for_ring == (
            RingCount(Ring.HOLD, 2),
            RingCount(Ring.ASSESS, 1),
        )
        assert tallies[1].votes_for_ring == (
            RingCount(Ring.ASSESS, 2),
            RingCount(Ring.TRIAL, 1),
        )
        assert tallies[2].votes_for_ring == (RingCount(Ring.ADOPT, 2),)

    def test_equal_counts_keep_first_seen_order(self) -> None:
        votes = [
            make_vote("t", "trial", "A"),
            make_vote("t", "hold", "B"),
            make_vote("t", "hold", "C"),
            make_vote("t", "trial", "D"),
        ]

        [tally] = tally_votes(votes)

        assert [rc.ring for rc in tally.votes_for_ring] == [Ring.TRIAL, Ring.HOLD]

    def test_tags_counted_once_per_vote(self) -> None:
        votes = [
            make_vote("t", "adopt", "A", tags=("cloud", "cloud", "infra")),
            make_vote("t", "adopt", "B", tags=("infra",)),
        ]

        [tally] = tally_votes(votes)

        assert tally.votes_for_tag == (TagCount("infra", 2), TagCount("cloud", 1))

    def test_no_tags_gives_none(self) -> None:
        [tally] = tally_votes([make_vote("t", "adopt")])

        assert tally.votes_for_tag is None

    def test_round_filter(self) -> None:
        votes = [
            make_vote("t", "hold", "A", event_round=1),
            make_vote("t", "adopt", "A", event_round=2),
            make_vote("t", "adopt", "B", event_round=2),
        ]

        [tally] = tally_votes(votes, round_number=2)

        assert tally.votes_for_ring == (RingCount(Ring.ADOPT, 2),)

    def test_empty_input(self) -> None:
        assert tally_votes([]) == []

    def test_group_by_name(self) -> None:
        votes = [
            make_vote("id-a", "hold", "A", technology_name="Rust", event_id="e1"),
            make_vote("id-b", "hold", "B", technology_name="Rust", event_id="e2"),
        ]

        tallies = tally_votes(votes, key=lambda v: v.technology.name)

        assert len(tallies) == 1
        assert tallies[0].number_of_votes == 2


class TestContested:
    """Tests for the revote flag of a tally."""

    def test_two_way_tie_is_contested(self) -> None:
        votes = [
            make_vote("t", ring, f"V{i}")
            for i, ring in enumerate(["hold", "hold", "assess", "assess", "trial"])
        ]

        [tally] = tally_votes(votes)

        assert tally.is_contested is True

    def test_clear_winner_is_not_contested(self) -> None:
        votes = [make_vote("t", "hold", "A"), make_vote("t", "hold", "B")]

        [tally] = tally_votes(votes)

        assert tally.is_contested is False

    def test_three_way_tie_is_contested(self) -> None:
        votes = [
            make_vote("t", "adopt", "A"),
            make_vote("t", "trial", "B"),
            make_vote("t", "hold", "C"),
        ]

        [tally] = tally_votes(votes)

        assert tally.is_contested is True


class TestLatestRoundTallies:
    """Tests for latest_round_tallies()."""

    def test_uses_most_recent_round_with_votes(self) -> None:
        votes = [
            make_vote("a", "hold", "X", event_round=1),
            make_vote("a", "adopt", "Y", event_round=1),
            make_vote("b", "trial", "X", event_round=1),
            make_vote("a", "adopt", "X", event_round=2),
        ]

        latest = latest_round_tallies(votes, up_to_round=2)

        assert latest["a"][0] == 2
        assert latest["a"][1].votes_for_ring == (RingCount(Ring.ADOPT, 1),)
        assert latest["b"][0] == 1

    def test_ignores_rounds_after_limit(self) -> None:
        votes = [
            make_vote("a", "hold", "X", event_round=1),
            make_vote("a", "adopt", "X", event_round=3),
        ]

        latest = latest_round_tallies(votes, up_to_round=2)

        assert latest["a"][0] == 1
