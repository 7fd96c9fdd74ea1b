"""In-memory comment repository for testing."""

from datetime import datetime
from typing import List, Optional, Sequence

from huddle.domain.model.comment import Comment
from huddle.domain.repository.comment import CommentRepository
from huddle.domain.value import CommentId, CompanyId, PostId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment (reply counter is kept)."""
        existing = self._comments.get(comment.id)
        if existing is not None:
            comment = comment.model_copy(
                update={"replies_count": existing.replies_count}
            )
        self._comments[comment.id] = comment
        return comment

    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> None:
        """Adjust the reply counter (minimum 0)."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return
        self._comments[comment_id] = comment.model_copy(
            update={"replies_count": max(0, comment.replies_count + delta)}
        )

    async def find_ids_for_posts(self, post_ids: Sequence[PostId]) -> List[CommentId]:
        """List the IDs of every comment on the given posts."""
        return [c.id for c in self._comments.values() if c.post_id in post_ids]

    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete every comment on the given posts."""
        doomed = [c.id for c in self._comments.values() if c.post_id in post_ids]
        for comment_id in doomed:
            del self._comments[comment_id]
        return len(doomed)

    async def purge_deleted(self, company_id: CompanyId, deleted_before: datetime) -> int:
        """Hard-delete comments soft-deleted before the cutoff, with their replies."""
        doomed = {
            c.id
            for c in self._comments.values()
            if c.company_id == company_id
            and c.is_deleted
            and c.deleted_at is not None
            and c.deleted_at < deleted_before
        }
        doomed |= {
            c.id for c in self._comments.values() if c.parent_comment_id in doomed
        }
        for comment_id in doomed:
            del self._comments[comment_id]
        return len(doomed)
