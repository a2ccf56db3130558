"""Comment service.

Comments live in two places: the technology threads of an event, and the
single comment thread of each vote. Adding to either is a
compare-and-set on the owning document, so two replies written at the
same time cannot overwrite each other. On an event the comment is laid
onto the fresh copy when another write got there first.
"""

from __future__ import annotations

from typing import Any

from tech_radar.application.ports.vote_store import VoteStoreProtocol
from tech_radar.application.ports.voting_event_store import VotingEventStoreProtocol
from tech_radar.application.services.base import (
    DEFAULT_STORE_TIMEOUT_SECONDS,
    EventStoreMixin,
)
from tech_radar.domain.errors import VoteNotFoundError
from tech_radar.domain.models.vote import Vote
from tech_radar.domain.models.voting_event import VotingEvent
from tech_radar.domain.services import comment_tree


class CommentService(EventStoreMixin):
    """Technology comments and replies to vote comments."""

    def __init__(
        self,
        event_store: VotingEventStoreProtocol,
        vote_store: VoteStoreProtocol,
        default_timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._event_store = event_store
        self._vote_store = vote_store
        self._init_logger(component="comment")
        self._init_store_calls(default_timeout)

    async def add_comment_to_technology(
        self,
        event_id: str,
        technology_id: str,
        text: str,
        author: str | None = None,
    ) -> tuple[VotingEvent, str]:
        """Append a top-level comment to a technology of an event.

        Returns:
            (updated event, new comment id)

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyNotPresentError: If the technology is not in the event.
        """
        log = self._log_operation(
            "add_comment_to_technology",
            event_id=event_id,
            technology_id=technology_id,
        )
        event = await self._get_event(event_id)
        comment_id = ""

        def add(current: VotingEvent) -> VotingEvent:
            nonlocal comment_id
            technology = current.technology(technology_id)
            thread, comment_id = comment_tree.add_comment(
                technology.comments, text, author
            )
            return current.with_technology(technology.with_comments(thread))

        stored = await self._reapply_event(event, add)
        log.info("technology_comment_added", comment_id=comment_id)
        return stored, comment_id

    async def add_reply_to_technology_comment(
        self,
        event_id: str,
        technology_id: str,
        target_comment_id: str,
        text: str,
        author: str | None = None,
    ) -> tuple[VotingEvent, str]:
        """Reply to any comment in a technology's thread.

        Raises:
            EventNotFoundError: If missing or soft-cancelled.
            TechnologyNotPresentError: If the technology is not in the event.
            CommentTargetNotFoundError: If the target is not in the thread.
        """
        log = self._log_operation(
            "add_reply_to_technology_comment",
            event_id=event_id,
            technology_id=technology_id,
            target_comment_id=target_comment_id,
        )
        event = await self._get_event(event_id)
        reply_id = ""

        def reply(current: VotingEvent) -> VotingEvent:
            nonlocal reply_id
            technology = current.technology(technology_id)
            thread, reply_id = comment_tree.add_reply(
                technology.comments, target_comment_id, text, author
            )
            return current.with_technology(technology.with_comments(thread))

        stored = await self._reapply_event(event, reply)
        log.info("technology_comment_reply_added", reply_id=reply_id)
        return stored, reply_id

    async def add_reply_to_vote_comment(
        self,
        vote_id: str,
        target_comment_id: str,
        text: str,
        author: str | None = None,
    ) -> tuple[Vote, str]:
        """Reply to the comment of a vote, or to any reply below it.

        Raises:
            VoteNotFoundError: If the vote does not exist.
            CommentTargetNotFoundError: If the vote has no comment or the
                target is not in its thread.
            ConcurrentModificationError: If the vote changed meanwhile.
        """
        log = self._log_operation(
            "add_reply_to_vote_comment",
            vote_id=vote_id,
            target_comment_id=target_comment_id,
        )
        vote = await self._call_store("get_vote", self._vote_store.get(vote_id))
        if vote is None:
            raise VoteNotFoundError(vote_id)
        thread, reply_id = comment_tree.add_reply(
            vote.comment, target_comment_id, text, author
        )
        stored = await self._call_store(
            "update_vote",
            self._vote_store.update_cas(
                vote.with_comment(thread), expected_version=vote.version
            ),
        )
        log.info("vote_comment_reply_added", reply_id=reply_id)
        return stored, reply_id

    async def get_votes_with_comments_for_tech(
        self,
        technology_id: str,
        event_id: str | None = None,
    ) -> list[Vote]:
        """Votes on a technology that carry a comment."""
        votes = await self._call_store(
            "find_votes",
            self._vote_store.find(event_id=event_id, technology_id=technology_id),
        )
        return [vote for vote in votes if vote.comment.root_ids]

    async def get_votes_comments_for_tech(
        self,
        technology_id: str,
        event_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Comments of the votes on a technology, with their replies nested."""
        votes = await self.get_votes_with_comments_for_tech(technology_id, event_id)
        return [doc for vote in votes for doc in vote.comment.to_nested()]
