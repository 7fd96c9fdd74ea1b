"""Create comment use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase, best_effort, invalidate_post
from huddle.domain.model.comment import Comment
from huddle.domain.model.point_event import PointMeta
from huddle.domain.service import (
    CommentService,
    CompanyService,
    MicrocacheService,
    PointsService,
)
from huddle.domain.value import (
    CommentId,
    CommentStatus,
    PointAction,
    PostId,
    TargetType,
    UserId,
)


class CommentView(BaseModel):
    """Comment as returned by the API."""

    comment_id: str
    post_id: str
    author_id: str
    content: str
    parent_comment_id: Optional[str]
    level: int
    status: CommentStatus
    replies_count: int
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentView":
        return cls(
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            author_id=str(comment.author_id),
            content=comment.content,
            parent_comment_id=str(comment.parent_comment_id)
            if comment.parent_comment_id
            else None,
            level=comment.level,
            status=comment.status,
            replies_count=comment.replies_count,
            created_at=comment.created_at,
        )


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    org: str
    user_id: UUID
    post_id: UUID
    content: str = Field(min_length=1, max_length=10000)
    parent_comment_id: Optional[UUID] = None


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment: CommentView


class CreateCommentUseCase(BaseUseCase):
    """Use case for commenting on a post or replying to a comment."""

    def __init__(
        self,
        company_service: CompanyService,
        comment_service: CommentService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize create comment use case.

        Args:
            company_service: Tenant and member resolution
            comment_service: Comment domain service
            points_service: Points ledger
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.comment_service = comment_service
        self.points_service = points_service
        self.microcache = microcache

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The author earns COMMENT_CREATED (or REPLY_CREATED); the post author
        (or parent comment author) earns the matching RECEIVED action when
        they are someone else.

        Args:
            request: Create comment request

        Returns:
            The created comment
        """
        with logfire.span("create_comment.execute", post_id=str(request.post_id)):
            company = await self.company_service.resolve_tenant(request.org)
            author = await self.company_service.resolve_member(
                company, UserId(request.user_id)
            )

            comment, post, parent = await self.comment_service.create_comment(
                company,
                author,
                PostId(request.post_id),
                request.content,
                parent_comment_id=CommentId(request.parent_comment_id)
                if request.parent_comment_id
                else None,
            )

            meta = PointMeta(
                post_id=post.id,
                comment_id=comment.id,
                parent_comment_id=parent.id if parent else None,
            )
            if parent is None:
                created, received, recipient = (
                    PointAction.COMMENT_CREATED,
                    PointAction.COMMENT_RECEIVED,
                    post.author_id,
                )
            else:
                created, received, recipient = (
                    PointAction.REPLY_CREATED,
                    PointAction.REPLY_RECEIVED,
                    parent.author_id,
                )

            await best_effort(
                self.points_service.award(
                    company,
                    user_id=author.id,
                    action=created,
                    target_type=TargetType.COMMENT,
                    target_id=comment.id,
                    actor_user_id=author.id,
                    meta=meta,
                ),
                "award_comment_created",
                comment_id=str(comment.id),
            )
            if recipient != author.id:
                await best_effort(
                    self.points_service.award(
                        company,
                        user_id=recipient,
                        action=received,
                        target_type=TargetType.COMMENT,
                        target_id=comment.id,
                        actor_user_id=author.id,
                        meta=meta,
                    ),
                    "award_comment_received",
                    comment_id=str(comment.id),
                )

            await invalidate_post(self.microcache, company.slug.root, post)
            return CreateCommentResponse(comment=CommentView.from_comment(comment))
