"""Reaction domain service."""

from typing import Optional
from uuid import UUID, uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from huddle.domain.error import BusinessRuleViolationError, NotFoundError
from huddle.domain.model.company import Company
from huddle.domain.model.post import Post
from huddle.domain.model.reaction import Reaction
from huddle.domain.model.user import User
from huddle.domain.repository import (
    CommentRepository,
    PostRepository,
    ReactionRepository,
)
from huddle.domain.value import (
    CommentId,
    PostId,
    ReactionId,
    ReactionType,
    TargetType,
    UserId,
)
from huddle.domain.value.common import ValueObject

from .base import Service


class ReactionToggle(ValueObject):
    """Outcome of a reaction toggle.

    ``previous`` and ``current`` are the user's reaction types before and
    after the toggle (None meaning no reaction).
    """

    previous: Optional[ReactionType] = None
    current: Optional[ReactionType] = None
    target_type: TargetType
    target_id: UUID
    post: Post
    comment_id: Optional[CommentId] = None
    owner_id: UserId

    @property
    def changed(self) -> bool:
        return self.previous != self.current


class ReactionService(Service):
    """Domain service for reactions on posts and comments."""

    def __init__(
        self,
        reaction_repository: ReactionRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
    ) -> None:
        """Initialize reaction service.

        Args:
            reaction_repository: Reaction repository
            post_repository: Post repository (counters)
            comment_repository: Comment repository (comment targets)
        """
        self.reaction_repository = reaction_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository

    async def toggle(
        self,
        company: Company,
        user: User,
        target_type: TargetType,
        target_id: UUID,
        reaction_type: ReactionType,
    ) -> ReactionToggle:
        """Add, remove or switch the user's reaction on a target.

        - no reaction: add it
        - same type: remove it
        - different type: switch to the new type

        Post targets keep per-type counters in sync with atomic increments.

        Args:
            company: Tenant
            user: Reacting member
            target_type: Post or comment
            target_id: Target ID
            reaction_type: Requested reaction type

        Returns:
            Toggle outcome

        Raises:
            NotFoundError: If the target does not exist in the tenant
        """
        with logfire.span(
            "reaction_service.toggle",
            user_id=str(user.id),
            target_type=target_type.value,
            target_id=str(target_id),
            reaction_type=reaction_type.value,
        ):
            post, comment_id, owner_id = await self._resolve_target(
                company, target_type, target_id
            )

            existing = await self.reaction_repository.find_by_user_and_target(
                user.id, target_type, target_id
            )
            counts_on_post = target_type == TargetType.POST

            if existing is None:
                try:
                    await self.reaction_repository.save(
                        Reaction(
                            id=ReactionId(uuid4()),
                            company_id=company.id,
                            user_id=user.id,
                            target_type=target_type,
                            target_id=target_id,
                            type=reaction_type,
                        )
                    )
                except IntegrityError:
                    logfire.warn("Concurrent reaction insert", user_id=str(user.id))
                    raise BusinessRuleViolationError("Reaction already recorded")
                if counts_on_post:
                    await self.post_repository.increment_reaction_count(
                        post.id, reaction_type, 1
                    )
                previous, current = None, reaction_type

            elif existing.type == reaction_type:
                await self.reaction_repository.delete(existing.id)
                if counts_on_post:
                    await self.post_repository.increment_reaction_count(
                        post.id, reaction_type, -1
                    )
                previous, current = reaction_type, None

            else:
                await self.reaction_repository.save(
                    existing.model_copy(update={"type": reaction_type})
                )
                if counts_on_post:
                    await self.post_repository.increment_reaction_count(
                        post.id, existing.type, -1
                    )
                    await self.post_repository.increment_reaction_count(
                        post.id, reaction_type, 1
                    )
                previous, current = existing.type, reaction_type

            logfire.info(
                "Reaction toggled",
                previous=previous.value if previous else None,
                current=current.value if current else None,
            )
            return ReactionToggle(
                previous=previous,
                current=current,
                target_type=target_type,
                target_id=target_id,
                post=post,
                comment_id=comment_id,
                owner_id=owner_id,
            )

    async def _resolve_target(
        self, company: Company, target_type: TargetType, target_id: UUID
    ) -> tuple[Post, Optional[CommentId], UserId]:
        if target_type == TargetType.POST:
            post = await self.post_repository.find_by_id(PostId(target_id))
            if not self.in_tenant(post, company) or not post.is_visible:
                raise NotFoundError("Post", str(target_id))
            return post, None, post.author_id

        comment = await self.comment_repository.find_by_id(CommentId(target_id))
        if not self.in_tenant(comment, company) or comment.is_deleted:
            raise NotFoundError("Comment", str(target_id))
        post = await self.post_repository.find_by_id(comment.post_id)
        if post is None or not post.is_visible:
            raise NotFoundError("Post", str(comment.post_id))
        return post, comment.id, comment.author_id
