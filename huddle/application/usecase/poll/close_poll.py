"""Close poll use case."""

from uuid import UUID

from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, invalidate_post
from huddle.application.usecase.poll.vote_poll import PollResponse
from huddle.application.usecase.post.view import PostView
from huddle.domain.service import CompanyService, MicrocacheService, PollService
from huddle.domain.value import PostId, UserId


class ClosePollRequest(BaseModel):
    """Close poll request."""

    org: str
    user_id: UUID
    post_id: UUID


class ClosePollUseCase(BaseUseCase):
    """Use case for closing a poll."""

    def __init__(
        self,
        company_service: CompanyService,
        poll_service: PollService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize close poll use case.

        Args:
            company_service: Tenant and member resolution
            poll_service: Poll domain service
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.poll_service = poll_service
        self.microcache = microcache

    async def execute(self, request: ClosePollRequest) -> PollResponse:
        """Execute close poll flow."""
        company = await self.company_service.resolve_tenant(request.org)
        user = await self.company_service.resolve_member(company, UserId(request.user_id))

        post = await self.poll_service.close(company, user, PostId(request.post_id))
        await invalidate_post(self.microcache, company.slug.root, post)
        return PollResponse(post=PostView.from_post(post))
