"""Comment tree engine.

Adds comments and replies to a CommentThread. Threads are immutable, so
every operation returns the new thread together with the id it created.
Reply targets are located by a depth-first search from the top-level
comments over child-id lists; a comment that is stored in the arena but
unreachable from the roots is not a valid target.
"""

from __future__ import annotations

from datetime import datetime, timezone

from tech_radar.domain.errors.comment import CommentTargetNotFoundError
from tech_radar.domain.models.comment import Comment, CommentThread
from tech_radar.domain.models.technology import new_id


def _new_comment(
    text: str,
    author: str | None,
    comment_id: str | None,
    now: datetime | None,
) -> Comment:
    return Comment(
        id=comment_id or new_id(),
        text=text,
        author=author,
        timestamp=now or datetime.now(timezone.utc),
    )


def add_comment(
    thread: CommentThread,
    text: str,
    author: str | None = None,
    *,
    comment_id: str | None = None,
    now: datetime | None = None,
) -> tuple[CommentThread, str]:
    """Append a top-level comment.

    Returns:
        (new thread, id of the new comment)
    """
    comment = _new_comment(text, author, comment_id, now)
    comments = dict(thread.comments)
    comments[comment.id] = comment
    thread = CommentThread(comments=comments, root_ids=(*thread.root_ids, comment.id))
    return thread, comment.id


def single_comment(
    text: str,
    author: str | None = None,
    *,
    now: datetime | None = None,
) -> CommentThread:
    """Thread holding exactly one comment, as attached to a vote."""
    thread, _ = add_comment(CommentThread(), text, author, now=now)
    return thread


def find_path(thread: CommentThread, comment_id: str) -> list[Comment] | None:
    """Path from a top-level comment down to ``comment_id``.

    Returns:
        Comments from root to target inclusive, or None if unreachable.
    """
    stack: list[tuple[str, tuple[str, ...]]] = [
        (cid, ()) for cid in reversed(thread.root_ids)
    ]
    while stack:
        current_id, ancestors = stack.pop()
        path = (*ancestors, current_id)
        if current_id == comment_id:
            return [thread.comments[cid] for cid in path]
        for reply_id in reversed(thread.comments[current_id].reply_ids):
            stack.append((reply_id, path))
    return None


def find(thread: CommentThread, comment_id: str) -> Comment | None:
    path = find_path(thread, comment_id)
    return path[-1] if path else None


def depth_of(thread: CommentThread, comment_id: str) -> int:
    """Nesting depth of a comment; 0 for a top-level comment.

    Raises:
        CommentTargetNotFoundError: If the comment is not reachable.
    """
    path = find_path(thread, comment_id)
    if path is None:
        raise CommentTargetNotFoundError(comment_id)
    return len(path) - 1


def count(thread: CommentThread) -> int:
    """Number of comments reachable from the roots, replies included."""
    return sum(1 for _ in thread.walk())


def add_reply(
    thread: CommentThread,
    target_comment_id: str,
    text: str,
    author: str | None = None,
    *,
    comment_id: str | None = None,
    now: datetime | None = None,
) -> tuple[CommentThread, str]:
    """Append a reply as the last child of a comment anywhere in the tree.

    Args:
        thread: Thread to reply in.
        target_comment_id: Id of the comment being replied to.
        text: Reply content.
        author: Optional author name.

    Returns:
        (new thread, id of the reply)

    Raises:
        CommentTargetNotFoundError: If the thread is empty or the target
            is not reachable from its top-level comments.
    """
    target = find(thread, target_comment_id)
    if target is None:
        raise CommentTargetNotFoundError(target_comment_id)

    reply = _new_comment(text, author, comment_id, now)
    comments = dict(thread.comments)
    comments[reply.id] = reply
    comments[target.id] = target.with_reply(reply.id)
    return CommentThread(comments=comments, root_ids=thread.root_ids), reply.id
