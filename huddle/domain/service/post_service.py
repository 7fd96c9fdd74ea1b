"""Post domain service."""

from typing import Optional
from uuid import uuid4

import logfire

from huddle.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from huddle.domain.model.common import utcnow
from huddle.domain.model.company import Company
from huddle.domain.model.post import Poll, Post
from huddle.domain.model.user import User
from huddle.domain.repository import GroupRepository, PostRepository
from huddle.domain.value import (
    GroupId,
    PostId,
    PostingMode,
    PostStatus,
    PostType,
)

from .base import Service


class PostService(Service):
    """Domain service for post lifecycle operations."""

    def __init__(
        self, post_repository: PostRepository, group_repository: GroupRepository
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            group_repository: Group repository
        """
        self.post_repository = post_repository
        self.group_repository = group_repository

    async def get_post(
        self, company: Company, post_id: PostId, include_hidden: bool = False
    ) -> Post:
        """Get a post of the tenant.

        Args:
            company: Tenant
            post_id: Post ID
            include_hidden: Also return queued, rejected and deleted posts

        Returns:
            The post

        Raises:
            NotFoundError: If the post does not exist in the tenant or is hidden
        """
        with logfire.span("post_service.get_post", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)
            if not self.in_tenant(post, company):
                logfire.warn("Post not found", post_id=str(post_id))
                raise NotFoundError("Post", str(post_id))
            if not include_hidden and not post.is_visible:
                raise NotFoundError("Post", str(post_id))
            return post

    async def create_post(
        self,
        company: Company,
        author: User,
        type: PostType,
        rich_text: str,
        title: Optional[str] = None,
        group_id: Optional[GroupId] = None,
        poll: Optional[Poll] = None,
        pin: bool = False,
    ) -> Post:
        """Create a post subject to the tenant's posting policy.

        MODERATED tenants queue new posts; OPEN tenants publish them at
        once. Only moderators and admins can pin, and only announcements.

        Args:
            company: Tenant
            author: Posting member
            type: Post type
            rich_text: HTML body
            title: Optional title
            group_id: Group to post in
            poll: Poll sub-document for POLL posts
            pin: Request pinning

        Returns:
            Created post

        Raises:
            NotFoundError: If the group does not exist in the tenant
            ValidationError: If the content is invalid for the type
        """
        with logfire.span(
            "post_service.create_post",
            company_id=str(company.id),
            author_id=str(author.id),
            type=type.value,
        ):
            if group_id is not None:
                group = await self.group_repository.find_by_id(group_id)
                if not self.in_tenant(group, company):
                    raise NotFoundError("Group", str(group_id))

            if type != PostType.POLL and poll is not None:
                raise ValidationError("Only poll posts can carry a poll")

            now = utcnow()
            moderated = company.policies.posting_mode == PostingMode.MODERATED
            status = PostStatus.QUEUED if moderated else PostStatus.PUBLISHED

            try:
                post = Post(
                    id=PostId(uuid4()),
                    company_id=company.id,
                    group_id=group_id,
                    author_id=author.id,
                    type=type,
                    status=status,
                    title=title,
                    rich_text=rich_text,
                    is_pinned=pin
                    and type == PostType.ANNOUNCEMENT
                    and author.role.can_moderate,
                    poll=poll,
                    created_at=now,
                    published_at=None if moderated else now,
                )
            except ValueError as e:
                raise ValidationError(str(e))

            saved = await self.post_repository.save(post)
            logfire.info(
                "Post created",
                post_id=str(saved.id),
                status=saved.status.value,
                pinned=saved.is_pinned,
            )
            return saved

    async def approve_post(self, company: Company, moderator: User, post_id: PostId) -> Post:
        """Publish a queued post.

        Args:
            company: Tenant
            moderator: Acting moderator or admin
            post_id: Queued post

        Returns:
            Published post

        Raises:
            NotAuthorizedError: If the member cannot moderate
            BusinessRuleViolationError: If the post is not queued
        """
        self._require_moderator(moderator, "approve", post_id)
        with logfire.span("post_service.approve_post", post_id=str(post_id)):
            post = await self.get_post(company, post_id, include_hidden=True)
            if post.deleted_at is not None or post.status != PostStatus.QUEUED:
                raise BusinessRuleViolationError("Only queued posts can be approved")

            approved = post.model_copy(
                update={"status": PostStatus.PUBLISHED, "published_at": utcnow()}
            )
            saved = await self.post_repository.save(approved)
            logfire.info("Post approved", post_id=str(post_id), by=str(moderator.id))
            return saved

    async def reject_post(self, company: Company, moderator: User, post_id: PostId) -> Post:
        """Reject a queued or approved post.

        Args:
            company: Tenant
            moderator: Acting moderator or admin
            post_id: Post under review

        Returns:
            Rejected post

        Raises:
            NotAuthorizedError: If the member cannot moderate
            BusinessRuleViolationError: If the post is not under review
        """
        self._require_moderator(moderator, "reject", post_id)
        with logfire.span("post_service.reject_post", post_id=str(post_id)):
            post = await self.get_post(company, post_id, include_hidden=True)
            if post.deleted_at is not None or post.status not in (
                PostStatus.QUEUED,
                PostStatus.APPROVED,
            ):
                raise BusinessRuleViolationError(
                    "Only queued or approved posts can be rejected"
                )

            saved = await self.post_repository.save(
                post.model_copy(update={"status": PostStatus.REJECTED})
            )
            logfire.info("Post rejected", post_id=str(post_id), by=str(moderator.id))
            return saved

    async def delete_post(self, company: Company, user: User, post_id: PostId) -> Post:
        """Soft-delete a post.

        Authors can delete their own posts; moderators and admins any post.

        Args:
            company: Tenant
            user: Acting member
            post_id: Post to delete

        Returns:
            Deleted post (already-deleted posts are returned unchanged)

        Raises:
            NotAuthorizedError: If the member may not delete the post
        """
        with logfire.span("post_service.delete_post", post_id=str(post_id)):
            post = await self.get_post(company, post_id, include_hidden=True)
            if post.author_id != user.id and not user.role.can_moderate:
                raise NotAuthorizedError("delete", f"post {post_id}", str(user.id))
            if post.deleted_at is not None:
                return post

            saved = await self.post_repository.save(
                post.model_copy(update={"deleted_at": utcnow(), "deleted_by": user.id})
            )
            logfire.info("Post soft-deleted", post_id=str(post_id), by=str(user.id))
            return saved

    @staticmethod
    def _require_moderator(user: User, action: str, post_id: PostId) -> None:
        if not user.role.can_moderate:
            raise NotAuthorizedError(action, f"post {post_id}", str(user.id))
