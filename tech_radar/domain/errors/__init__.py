"""Domain errors for Tech Radar.

All exceptions inherit from RadarError.
"""

from tech_radar.domain.errors.comment import CommentTargetNotFoundError
from tech_radar.domain.errors.concurrent_modification import (
    ConcurrentModificationError,
    StaleRoundError,
)
from tech_radar.domain.errors.recommendation import (
    RecommendationAuthorAlreadySetError,
    RecommendationAuthorDifferentError,
)
from tech_radar.domain.errors.state_transition import InvalidStateTransitionError
from tech_radar.domain.errors.store import (
    OperationTimeoutError,
    StoreUnavailableError,
)
from tech_radar.domain.errors.vote import DuplicateVoteError, VoteNotFoundError
from tech_radar.domain.errors.voting_event import (
    DuplicateEventNameError,
    EventNotFoundError,
    InitiativeNotFoundError,
    TechnologyAlreadyPresentError,
    TechnologyNotEligibleError,
    TechnologyNotPresentError,
    VotingEventNotOpenError,
)
from tech_radar.domain.exceptions import RadarError

__all__: list[str] = [
    "RadarError",
    "CommentTargetNotFoundError",
    "ConcurrentModificationError",
    "StaleRoundError",
    "RecommendationAuthorAlreadySetError",
    "RecommendationAuthorDifferentError",
    "InvalidStateTransitionError",
    "OperationTimeoutError",
    "StoreUnavailableError",
    "DuplicateVoteError",
    "VoteNotFoundError",
    "DuplicateEventNameError",
    "EventNotFoundError",
    "InitiativeNotFoundError",
    "TechnologyAlreadyPresentError",
    "TechnologyNotEligibleError",
    "TechnologyNotPresentError",
    "VotingEventNotOpenError",
]
