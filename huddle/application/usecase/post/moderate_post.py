"""Approve / reject post use case."""

from enum import Enum
from uuid import UUID

import logfire
from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, best_effort, invalidate_post
from huddle.application.usecase.post.view import PostView
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    PointsService,
    PostService,
)
from huddle.domain.value import PointAction, PostId, TargetType, UserId


class ModerationDecision(str, Enum):
    """Outcome of a moderation review."""

    APPROVE = "approve"
    REJECT = "reject"


class ModeratePostRequest(BaseModel):
    """Moderate post request."""

    org: str
    user_id: UUID  # Acting moderator
    post_id: UUID
    decision: ModerationDecision


class ModeratePostResponse(BaseModel):
    """Moderate post response."""

    post: PostView


class ModeratePostUseCase(BaseUseCase):
    """Use case for approving or rejecting queued posts."""

    def __init__(
        self,
        company_service: CompanyService,
        post_service: PostService,
        points_service: PointsService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize moderate post use case.

        Args:
            company_service: Tenant and member resolution
            post_service: Post domain service
            points_service: Points ledger (credited on approval)
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.post_service = post_service
        self.points_service = points_service
        self.microcache = microcache

    async def execute(self, request: ModeratePostRequest) -> ModeratePostResponse:
        """Execute moderation flow.

        Raises:
            NotAuthorizedError: If the member cannot moderate
            BusinessRuleViolationError: If the post is not under review
        """
        with logfire.span(
            "moderate_post.execute",
            post_id=str(request.post_id),
            decision=request.decision.value,
        ):
            company = await self.company_service.resolve_tenant(request.org)
            moderator = await self.company_service.resolve_member(
                company, UserId(request.user_id)
            )
            post_id = PostId(request.post_id)

            if request.decision == ModerationDecision.APPROVE:
                post = await self.post_service.approve_post(company, moderator, post_id)
                await best_effort(
                    self.points_service.award(
                        company,
                        user_id=post.author_id,
                        action=PointAction.POST_CREATED,
                        target_type=TargetType.POST,
                        target_id=post.id,
                        actor_user_id=post.author_id,
                    ),
                    "award_post_created",
                    post_id=str(post.id),
                )
            else:
                post = await self.post_service.reject_post(company, moderator, post_id)

            await invalidate_post(self.microcache, company.slug.root, post)
            return ModeratePostResponse(post=PostView.from_post(post))
