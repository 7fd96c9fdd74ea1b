"""Vote on poll use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase, invalidate_post
from huddle.application.usecase.post.view import PostView
from huddle.domain.service import CompanyService, MicrocacheService, PollService
from huddle.domain.value import PostId, UserId


class VotePollRequest(BaseModel):
    """Vote on poll request."""

    org: str
    user_id: UUID
    post_id: UUID
    # Question ID -> selected option IDs
    selections: dict[UUID, list[UUID]] = Field(min_length=1)


class PollResponse(BaseModel):
    """Poll post after a vote or close."""

    post: PostView


class VotePollUseCase(BaseUseCase):
    """Use case for casting a poll vote."""

    def __init__(
        self,
        company_service: CompanyService,
        poll_service: PollService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize vote poll use case.

        Args:
            company_service: Tenant and member resolution
            poll_service: Poll domain service
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.poll_service = poll_service
        self.microcache = microcache

    async def execute(self, request: VotePollRequest) -> PollResponse:
        """Execute vote flow.

        Raises:
            BusinessRuleViolationError: If the poll is closed or already voted
            ValidationError: If the selections don't fit the poll
        """
        with logfire.span("vote_poll.execute", post_id=str(request.post_id)):
            company = await self.company_service.resolve_tenant(request.org)
            user = await self.company_service.resolve_member(
                company, UserId(request.user_id)
            )

            post = await self.poll_service.vote(
                company, user, PostId(request.post_id), request.selections
            )
            await invalidate_post(self.microcache, company.slug.root, post)
            return PollResponse(post=PostView.from_post(post))
