"""Comment domain service."""

from typing import Optional
from uuid import uuid4

import logfire

from huddle.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from huddle.domain.model.comment import DELETED_PLACEHOLDER, Comment
from huddle.domain.model.common import utcnow
from huddle.domain.model.company import Company
from huddle.domain.model.post import Post
from huddle.domain.model.user import User
from huddle.domain.repository import CommentRepository, PostRepository
from huddle.domain.value import CommentId, CommentStatus, PostId

from .base import Service


class CommentService(Service):
    """Domain service for comments and replies."""

    def __init__(
        self, comment_repository: CommentRepository, post_repository: PostRepository
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_repository: Post repository (comment counters)
        """
        self.comment_repository = comment_repository
        self.post_repository = post_repository

    async def get_comment(self, company: Company, comment_id: CommentId) -> Comment:
        """Get a comment of the tenant.

        Raises:
            NotFoundError: If the comment does not exist in the tenant
        """
        comment = await self.comment_repository.find_by_id(comment_id)
        if not self.in_tenant(comment, company):
            raise NotFoundError("Comment", str(comment_id))
        return comment

    async def create_comment(
        self,
        company: Company,
        author: User,
        post_id: PostId,
        content: str,
        parent_comment_id: Optional[CommentId] = None,
    ) -> tuple[Comment, Post, Optional[Comment]]:
        """Comment on a post, or reply to a top-level comment.

        Increments the post's comment counter and, for replies, the parent's
        reply counter.

        Args:
            company: Tenant
            author: Commenting member
            post_id: Post commented on
            content: Comment text
            parent_comment_id: Top-level comment being replied to

        Returns:
            The new comment, the post and the parent comment (None for
            top-level comments)

        Raises:
            NotFoundError: If the post or parent does not exist
            BusinessRuleViolationError: If the parent is deleted or a reply
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author.id),
            is_reply=parent_comment_id is not None,
        ):
            post = await self.post_repository.find_by_id(post_id)
            if not self.in_tenant(post, company) or not post.is_visible:
                raise NotFoundError("Post", str(post_id))

            parent = None
            if parent_comment_id is not None:
                parent = await self.get_comment(company, parent_comment_id)
                if parent.post_id != post.id:
                    raise NotFoundError("Comment", str(parent_comment_id))
                if parent.is_deleted:
                    raise BusinessRuleViolationError("Cannot reply to a deleted comment")
                if parent.is_reply:
                    raise BusinessRuleViolationError("Replies cannot be nested")

            content = content.strip()
            if not content:
                raise ValidationError("Comment cannot be empty")

            comment = await self.comment_repository.save(
                Comment(
                    id=CommentId(uuid4()),
                    company_id=company.id,
                    post_id=post.id,
                    author_id=author.id,
                    content=content,
                    parent_comment_id=parent.id if parent else None,
                    level=1 if parent else 0,
                )
            )

            await self.post_repository.increment_comments_count(post.id, 1)
            if parent is not None:
                await self.comment_repository.increment_replies_count(parent.id, 1)

            logfire.info("Comment created", comment_id=str(comment.id))
            return comment, post, parent

    async def delete_comment(
        self, company: Company, user: User, comment_id: CommentId
    ) -> Comment:
        """Soft-delete a comment, keeping it as a placeholder.

        Counters are decremented only when the comment was still visible.

        Args:
            company: Tenant
            user: Acting member (author, moderator or admin)
            comment_id: Comment to delete

        Returns:
            The deleted comment

        Raises:
            NotAuthorizedError: If the member may not delete the comment
        """
        with logfire.span("comment_service.delete_comment", comment_id=str(comment_id)):
            comment = await self.get_comment(company, comment_id)
            if comment.author_id != user.id and not user.role.can_moderate:
                raise NotAuthorizedError("delete", f"comment {comment_id}", str(user.id))
            if comment.is_deleted:
                return comment

            deleted = await self.comment_repository.save(
                comment.model_copy(
                    update={
                        "status": CommentStatus.DELETED,
                        "content": DELETED_PLACEHOLDER,
                        "deleted_at": utcnow(),
                    }
                )
            )
            await self.post_repository.increment_comments_count(comment.post_id, -1)
            if comment.parent_comment_id is not None:
                await self.comment_repository.increment_replies_count(
                    comment.parent_comment_id, -1
                )

            logfire.info("Comment deleted", comment_id=str(comment_id), by=str(user.id))
            return deleted
