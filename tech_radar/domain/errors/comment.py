"""Comment tree errors."""

from __future__ import annotations

from tech_radar.domain.exceptions import RadarError


class CommentTargetNotFoundError(RadarError):
    """Raised when a reply names a comment that is not in the thread.

    Also raised when the container has no comment at all.

    Attributes:
        target_comment_id: The comment id the reply was aimed at.
    """

    def __init__(self, target_comment_id: str) -> None:
        self.target_comment_id = target_comment_id
        super().__init__(f"Comment to reply to not found: {target_comment_id}")
