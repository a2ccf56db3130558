"""Vote errors."""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class DuplicateVoteError(RadarError):
    """Raised when a voter already voted for a technology in a round.

    Detected by the store's uniqueness constraint on insert, never by a
    separate read.

    Attributes:
        event_id: Voting event id.
        event_round: Round of the rejected vote.
        technology_id: Technology of the rejected vote.
        voter_key: Normalized voter identity.
    """

    def __init__(
        self,
        event_id: str,
        event_round: int,
        technology_id: str,
        voter_key: str,
    ) -> None:
        self.event_id = event_id
        self.event_round = event_round
        self.technology_id = technology_id
        self.voter_key = voter_key
        super().__init__(
            f"Voter '{voter_key}' already voted for technology {technology_id} "
            f"in round {event_round} of voting event {event_id}"
        )


class VoteNotFoundError(RadarError):
    """Raised when a vote id does not resolve."""

    def __init__(self, vote_id: str) -> None:
        self.vote_id = vote_id
        super().__init__(f"Vote not found: {vote_id}")
