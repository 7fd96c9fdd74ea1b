"""Delete post use case."""

from uuid import UUID

from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, invalidate_post
from huddle.application.usecase.post.view import PostView
from huddle.domain.service import CompanyService, MicrocacheService, PostService
from huddle.domain.value import PostId, UserId


class DeletePostRequest(BaseModel):
    """Delete post request."""

    org: str
    user_id: UUID
    post_id: UUID


class DeletePostResponse(BaseModel):
    """Delete post response."""

    post: PostView


class DeletePostUseCase(BaseUseCase):
    """Use case for soft-deleting a post."""

    def __init__(
        self,
        company_service: CompanyService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize delete post use case.

        Args:
            company_service: Tenant and member resolution
            post_service: Post domain service
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.post_service = post_service
        self.microcache = microcache

    async def execute(self, request: DeletePostRequest) -> DeletePostResponse:
        """Execute delete post flow."""
        company = await self.company_service.resolve_tenant(request.org)
        user = await self.company_service.resolve_member(company, UserId(request.user_id))

        post = await self.post_service.delete_post(company, user, PostId(request.post_id))
        await invalidate_post(self.microcache, company.slug.root, post)

        return DeletePostResponse(post=PostView.from_post(post))
