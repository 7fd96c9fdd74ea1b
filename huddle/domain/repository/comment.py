"""Comment repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from huddle.domain.model.comment import Comment
from huddle.domain.value import CommentId, CompanyId, PostId


class CommentRepository(ABC):
    """Repository for Comment entities."""

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> None:
        """Atomically adjust the reply counter of a top-level comment.

        Args:
            comment_id: Parent comment ID
            delta: Signed amount (counter never drops below zero)
        """
        pass

    @abstractmethod
    async def find_ids_for_posts(self, post_ids: Sequence[PostId]) -> List[CommentId]:
        """List the IDs of every comment on the given posts.

        Args:
            post_ids: Post IDs

        Returns:
            Comment IDs, including deleted placeholders
        """
        pass

    @abstractmethod
    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete every comment on the given posts.

        Args:
            post_ids: Posts being purged

        Returns:
            Number of deleted comments
        """
        pass

    @abstractmethod
    async def purge_deleted(self, company_id: CompanyId, deleted_before: datetime) -> int:
        """Hard-delete comments soft-deleted before the cutoff.

        Args:
            company_id: Tenant to sweep
            deleted_before: Cutoff for ``deleted_at``

        Returns:
            Number of deleted comments
        """
        pass
