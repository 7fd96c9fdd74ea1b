"""Poll voting domain service."""

from typing import Mapping, Sequence
from uuid import UUID

import logfire

from huddle.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from huddle.domain.model.common import utcnow
from huddle.domain.model.company import Company
from huddle.domain.model.post import Post
from huddle.domain.model.user import User
from huddle.domain.repository import PostRepository
from huddle.domain.value import PostId, PostType

from .base import Service


class PollService(Service):
    """Domain service for voting on and closing polls."""

    def __init__(self, post_repository: PostRepository) -> None:
        """Initialize poll service.

        Args:
            post_repository: Post repository
        """
        self.post_repository = post_repository

    async def _get_poll_post(self, company: Company, post_id: PostId) -> Post:
        post = await self.post_repository.find_by_id(post_id)
        if not self.in_tenant(post, company) or not post.is_visible:
            raise NotFoundError("Post", str(post_id))
        if post.type != PostType.POLL or post.poll is None:
            raise NotFoundError("Poll", str(post_id))
        return post

    async def vote(
        self,
        company: Company,
        user: User,
        post_id: PostId,
        selections: Mapping[UUID, Sequence[UUID]],
    ) -> Post:
        """Cast a member's single vote on a poll.

        Every question must be answered; single-select questions take exactly
        one option.

        Args:
            company: Tenant
            user: Voting member
            post_id: Poll post
            selections: Question ID -> selected option IDs

        Returns:
            Post with updated tallies

        Raises:
            NotFoundError: If the poll does not exist
            ValidationError: If the selections don't fit the questions
            BusinessRuleViolationError: If the poll is closed or already voted
        """
        with logfire.span("poll_service.vote", post_id=str(post_id), user_id=str(user.id)):
            post = await self._get_poll_post(company, post_id)
            poll = post.poll
            assert poll is not None

            if poll.is_closed or (poll.closes_at is not None and poll.closes_at <= utcnow()):
                raise BusinessRuleViolationError("Poll is closed")
            if poll.has_voted(user.id):
                raise BusinessRuleViolationError("Already voted on this poll")

            questions = {question.id: question for question in poll.questions}
            unknown = set(selections) - set(questions)
            if unknown:
                raise ValidationError("Unknown poll question")

            for question_id, question in questions.items():
                chosen = list(selections.get(question_id, []))
                if not chosen:
                    raise ValidationError(f"Question {question_id} needs an answer")
                if len(set(chosen)) != len(chosen):
                    raise ValidationError("Duplicate option selected")
                if not question.multi_select and len(chosen) > 1:
                    raise ValidationError("Question allows a single option")
                if not set(chosen) <= question.option_ids():
                    raise ValidationError("Unknown poll option")

            updated = await self.post_repository.record_poll_vote(
                post.id, user.id, selections
            )
            if updated is None:
                # Lost a race with another vote or a close
                raise BusinessRuleViolationError("Vote was not recorded")

            logfire.info("Poll vote recorded", post_id=str(post_id))
            return updated

    async def close(self, company: Company, user: User, post_id: PostId) -> Post:
        """Close a poll to further votes.

        Raises:
            NotAuthorizedError: If the member is neither author nor moderator
        """
        with logfire.span("poll_service.close", post_id=str(post_id)):
            post = await self._get_poll_post(company, post_id)
            if post.author_id != user.id and not user.role.can_moderate:
                raise NotAuthorizedError("close", f"poll {post_id}", str(user.id))
            assert post.poll is not None
            if post.poll.is_closed:
                return post

            closed = post.model_copy(
                update={
                    "poll": post.poll.model_copy(
                        update={"is_closed": True, "closes_at": utcnow()}
                    )
                }
            )
            saved = await self.post_repository.save(closed)
            logfire.info("Poll closed", post_id=str(post_id), by=str(user.id))
            return saved
