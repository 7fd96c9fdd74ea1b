"""Create post use case."""

from typing import Optional
from uuid import UUID, uuid4

import logfire
from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase, best_effort, invalidate_post
from huddle.application.usecase.post.view import PostView
from huddle.domain.model.post import Poll, PollOption, PollQuestion
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    PointsService,
    PostService,
)
from huddle.domain.value import GroupId, PointAction, PostType, TargetType, UserId


class PollQuestionInput(BaseModel):
    """Poll question as submitted by the author."""

    text: str = Field(min_length=1, max_length=500)
    options: list[str] = Field(min_length=2, max_length=20)
    multi_select: bool = False


class PollInput(BaseModel):
    """Poll as submitted by the author."""

    title: Optional[str] = None
    questions: list[PollQuestionInput] = Field(min_length=1, max_length=10)

    def to_poll(self) -> Poll:
        """Build the poll sub-document with fresh IDs and zero tallies."""
        return Poll(
            title=self.title,
            questions=[
                PollQuestion(
                    id=uuid4(),
                    text=question.text,
                    options=[
                        PollOption(id=uuid4(), label=label) for label in question.options
                    ],
                    multi_select=question.multi_select,
                )
                for question in self.questions
            ],
        )


class CreatePostRequest(BaseModel):
    """Create post request."""

    org: str
    user_id: UUID  # Requesting member
    type: PostType = PostType.TEXT
    title: Optional[str] = Field(default=None, max_length=300)
    rich_text: str = Field(default="", max_length=20000)
    group_id: Optional[UUID] = None
    poll: Optional[PollInput] = None
    pin: bool = False


class CreatePostResponse(BaseModel):
    """Create post response."""

    post: PostView


class CreatePostUseCase(BaseUseCase):
    """Use case for creating a post."""

    def __init__(
        self,
        company_service: CompanyService,
        post_service: PostService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize create post use case.

        Args:
            company_service: Tenant and member resolution
            post_service: Post domain service
            points_service: Points ledger
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.post_service = post_service
        self.points_service = points_service
        self.microcache = microcache

    async def execute(self, request: CreatePostRequest) -> CreatePostResponse:
        """Execute create post flow.

        Published posts bust the tenant (and group) feeds and earn the author
        POST_CREATED points; queued posts do both on approval.

        Args:
            request: Create post request

        Returns:
            The created post
        """
        with logfire.span("create_post.execute", org=request.org, type=request.type.value):
            company = await self.company_service.resolve_tenant(request.org)
            author = await self.company_service.resolve_member(
                company, UserId(request.user_id)
            )

            post = await self.post_service.create_post(
                company,
                author,
                type=request.type,
                rich_text=request.rich_text,
                title=request.title,
                group_id=GroupId(request.group_id) if request.group_id else None,
                poll=request.poll.to_poll() if request.poll else None,
                pin=request.pin,
            )

            if post.is_visible:
                await best_effort(
                    self.points_service.award(
                        company,
                        user_id=author.id,
                        action=PointAction.POST_CREATED,
                        target_type=TargetType.POST,
                        target_id=post.id,
                        actor_user_id=author.id,
                    ),
                    "award_post_created",
                    post_id=str(post.id),
                )
                await invalidate_post(self.microcache, company.slug.root, post)

            return CreatePostResponse(post=PostView.from_post(post))
