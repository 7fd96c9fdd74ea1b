"""Get post use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase
from huddle.application.usecase.post.view import PostView
from huddle.domain.service import CompanyService, MicrocacheService, PostService
from huddle.domain.value import PostId


class GetPostRequest(BaseModel):
    """Get post request."""

    org: str
    post_id: UUID
    path: str = ""  # Request path, selects the cache TTL tier


class GetPostResponse(BaseModel):
    """Get post response."""

    post: PostView
    cache_hit: bool = Field(default=False, exclude=True)


class GetPostUseCase(BaseUseCase):
    """Use case for reading a single post through the microcache."""

    def __init__(
        self,
        company_service: CompanyService,
        post_service: PostService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize get post use case.

        Args:
            company_service: Tenant resolution
            post_service: Post domain service
            microcache: Read-through cache
        """
        self.company_service = company_service
        self.post_service = post_service
        self.microcache = microcache

    async def execute(self, request: GetPostRequest) -> GetPostResponse:
        """Execute get post flow.

        Args:
            request: Get post request

        Returns:
            The post view

        Raises:
            TenantNotFoundError: If the tenant does not exist
            NotFoundError: If the post does not exist or is hidden
        """
        with logfire.span("get_post.execute", org=request.org, post_id=str(request.post_id)):
            company = await self.company_service.resolve_tenant(request.org)
            post_id = PostId(request.post_id)

            async def fetch() -> dict:
                post = await self.post_service.get_post(company, post_id)
                return PostView.from_post(post).model_dump(mode="json")

            lookup = await self.microcache.get_or_set(
                self.microcache.post_key(company.slug.root, post_id),
                self.microcache.compute_ttl(request.path or f"/posts/{post_id}"),
                fetch,
            )
            return GetPostResponse(
                post=PostView.model_validate(lookup.value),
                cache_hit=lookup.from_cache,
            )
