"""Comment thread domain model.

Comments attached to a vote or to a technology form reply trees of
unbounded depth. A thread is stored as an arena: comments are keyed by id
and each comment lists the ids of its replies. Nothing holds a reference to
another Comment object, so a thread is serializable as-is and free of
reference cycles.

A thread is never mutated in place. The operations in
tech_radar.domain.services.comment_tree return new threads.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, eq=True)
class Comment:
    """A single comment or reply.

    Attributes:
        id: Unique identifier assigned on creation.
        text: Comment content.
        timestamp: Creation time (UTC).
        author: Optional free-form author name.
        reply_ids: Ids of the direct replies, in creation order.
    """

    id: str
    text: str
    timestamp: datetime
    author: str | None = None
    reply_ids: tuple[str, ...] = ()

    def with_reply(self, reply_id: str) -> Comment:
        """Return a copy of this comment with one more reply id."""
        return Comment(
            id=self.id,
            text=self.text,
            timestamp=self.timestamp,
            author=self.author,
            reply_ids=(*self.reply_ids, reply_id),
        )


@dataclass(frozen=True, eq=True)
class CommentThread:
    """Arena of comments reachable from an ordered list of top-level ids.

    Attributes:
        comments: Every comment of the thread keyed by id.
        root_ids: Ids of the top-level comments, in creation order.
    """

    comments: dict[str, Comment] = field(default_factory=dict)
    root_ids: tuple[str, ...] = ()

    def __hash__(self) -> int:
        # Equal dicts may differ in insertion order.
        return hash((self.root_ids, frozenset(self.comments.items())))

    def __len__(self) -> int:
        return len(self.comments)

    def __contains__(self, comment_id: object) -> bool:
        return comment_id in self.comments

    def get(self, comment_id: str) -> Comment | None:
        return self.comments.get(comment_id)

    @property
    def roots(self) -> list[Comment]:
        """Top-level comments in creation order."""
        return [self.comments[cid] for cid in self.root_ids]

    def replies_to(self, comment_id: str) -> list[Comment]:
        """Direct replies of a comment, in creation order."""
        comment = self.comments[comment_id]
        return [self.comments[rid] for rid in comment.reply_ids]

    def walk(self) -> Iterator[tuple[Comment, int]]:
        """Depth-first pre-order traversal over child-id lists.

        Yields:
            (comment, depth) pairs, depth 0 being a top-level comment.
        """
        stack: list[tuple[str, int]] = [(cid, 0) for cid in reversed(self.root_ids)]
        while stack:
            comment_id, depth = stack.pop()
            comment = self.comments[comment_id]
            yield comment, depth
            for reply_id in reversed(comment.reply_ids):
                stack.append((reply_id, depth + 1))

    def to_nested(self) -> list[dict[str, Any]]:
        """Render the thread as nested comment documents.

        Each document has id, text, author, timestamp and, when the comment
        has replies, a ``replies`` list of documents of the same shape.
        """

        def render(comment_id: str) -> dict[str, Any]:
            comment = self.comments[comment_id]
            doc: dict[str, Any] = {
                "id": comment.id,
                "text": comment.text,
                "author": comment.author,
                "timestamp": comment.timestamp.isoformat(),
            }
            if comment.reply_ids:
                doc["replies"] = [render(rid) for rid in comment.reply_ids]
            return doc

        return [render(cid) for cid in self.root_ids]

    def to_dict(self) -> dict[str, Any]:
        """Flat, storage-friendly representation of the arena."""
        return {
            "root_ids": list(self.root_ids),
            "comments": {
                cid: {
                    "id": c.id,
                    "text": c.text,
                    "author": c.author,
                    "timestamp": c.timestamp.isoformat(),
                    "reply_ids": list(c.reply_ids),
                }
                for cid, c in self.comments.items()
            },
        }

    @classmethod
    def from_dict(cls, doc: dict[str, Any] | None) -> CommentThread:
        """Rebuild a thread from the output of to_dict()."""
        if not doc:
            return cls()
        comments = {
            cid: Comment(
                id=c["id"],
                text=c["text"],
                author=c.get("author"),
                timestamp=datetime.fromisoformat(c["timestamp"]),
                reply_ids=tuple(c.get("reply_ids", ())),
            )
            for cid, c in doc.get("comments", {}).items()
        }
        return cls(comments=comments, root_ids=tuple(doc.get("root_ids", ())))
