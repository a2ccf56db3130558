"""Recommendation lock errors.

A technology's recommendation is owned by a single declared author.
Authors are compared as trimmed strings.
"""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class RecommendationAuthorAlreadySetError(RadarError):
    """Raised when claiming a lock another author already holds.

    Attributes:
        technology: Name of the technology.
        current_author: The author holding the lock.
        requested_author: The author who tried to claim it.
    """

    def __init__(
        self,
        technology: str,
        current_author: str,
        requested_author: str,
    ) -> None:
        self.technology = technology
        self.current_author = current_author
        self.requested_author = requested_author
        super().__init__(
            f"Recommendation author for '{technology}' is already set to "
            f"'{current_author}'"
        )


class RecommendationAuthorDifferentError(RadarError):
    """Raised when a write or reset comes from someone other than the owner.

    Attributes:
        technology: Name of the technology.
        current_author: The author holding the lock.
        requested_by: The author or requester that was refused.
    """

    def __init__(
        self,
        technology: str,
        current_author: str | None,
        requested_by: str,
    ) -> None:
        self.technology = technology
        self.current_author = current_author
        self.requested_by = requested_by
        super().__init__(
            f"Recommendation for '{technology}' is owned by '{current_author}', "
            f"not '{requested_by}'"
        )
