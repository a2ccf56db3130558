"""Domain models for Tech Radar."""

from tech_radar.domain.models.blip import (
    Blip,
    RingCount,
    TagCount,
    TechnologyTally,
    VotingResult,
)
from tech_radar.domain.models.comment import Comment, CommentThread
from tech_radar.domain.models.ring import Ring
from tech_radar.domain.models.technology import Recommendation, Technology
from tech_radar.domain.models.vote import TechnologyRef, Vote, VoterIdentity
from tech_radar.domain.models.voting_event import (
    STATE_TRANSITION_MATRIX,
    VotingEvent,
    VotingEventStatus,
)

__all__ = [
    "Blip",
    "Comment",
    "CommentThread",
    "Recommendation",
    "Ring",
    "RingCount",
    "STATE_TRANSITION_MATRIX",
    "TagCount",
    "Technology",
    "TechnologyRef",
    "TechnologyTally",
    "Vote",
    "VoterIdentity",
    "VotingEvent",
    "VotingEventStatus",
    "VotingResult",
]
