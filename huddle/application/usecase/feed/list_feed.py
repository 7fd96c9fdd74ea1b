"""List feed use case."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase
from huddle.domain.error import NotFoundError
from huddle.domain.model.feed import FeedFilters, FeedItem, FeedResult
from huddle.domain.repository import GroupRepository
from huddle.domain.service import CompanyService, FeedService, MicrocacheService
from huddle.domain.value import FeedScope, GroupId, UserId


class ListFeedRequest(BaseModel):
    """List feed request.

    ``filters`` are already normalized; malformed query values never reach
    this point as errors.
    """

    org: str
    filters: FeedFilters = FeedFilters()
    group_id: Optional[UUID] = None  # Set for group feeds
    user_id: Optional[UUID] = None  # Requesting member, if known
    path: str = ""  # Request path, selects the cache TTL tier


class ListFeedResponse(BaseModel):
    """List feed response."""

    posts: list[FeedItem]
    total: int
    total_pages: int
    page: int
    limit: int
    cache_hit: bool = Field(default=False, exclude=True)


class ListFeedUseCase(BaseUseCase):
    """Use case for company and group feeds behind the microcache."""

    def __init__(
        self,
        company_service: CompanyService,
        feed_service: FeedService,
        group_repository: GroupRepository,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize list feed use case.

        Args:
            company_service: Tenant and member resolution
            feed_service: Feed query engine
            group_repository: Group repository (group feed lookup)
            microcache: Read-through cache
        """
        self.company_service = company_service
        self.feed_service = feed_service
        self.group_repository = group_repository
        self.microcache = microcache

    def cache_digest(
        self,
        scope: FeedScope,
        filters: FeedFilters,
        group_id: Optional[GroupId],
        requester_id: Optional[UserId],
    ) -> str:
        """Hash of everything that shapes a feed page.

        The requester is part of the digest only when the page depends on
        them (the my-groups filter).
        """
        normalized = filters.model_copy(
            update={"limit": self.feed_service.effective_limit(filters)}
        )
        return self.microcache.store.hash(
            {
                "scope": scope.value,
                "group_id": str(group_id) if group_id else None,
                "filters": normalized.model_dump(mode="json"),
                "requester": str(requester_id)
                if filters.my_groups and requester_id
                else None,
            }
        )

    async def execute(self, request: ListFeedRequest) -> ListFeedResponse:
        """Execute list feed flow.

        Args:
            request: List feed request

        Returns:
            One page of the feed

        Raises:
            TenantNotFoundError: If the tenant does not exist
            NotFoundError: If the group does not exist in the tenant
        """
        with logfire.span(
            "list_feed.execute",
            org=request.org,
            group_id=str(request.group_id) if request.group_id else None,
        ):
            company = await self.company_service.resolve_tenant(request.org)
            slug = company.slug.root

            requester_id = None
            if request.user_id is not None:
                member = await self.company_service.resolve_member(
                    company, UserId(request.user_id)
                )
                requester_id = member.id

            group_id = GroupId(request.group_id) if request.group_id else None
            if group_id is not None:
                group = await self.group_repository.find_by_id(group_id)
                if group is None or group.company_id != company.id:
                    raise NotFoundError("Group", str(group_id))
                scope = FeedScope.GROUP
            else:
                scope = FeedScope.COMPANY

            digest = self.cache_digest(scope, request.filters, group_id, requester_id)
            if group_id is not None:
                key = self.microcache.group_feed_key(slug, group_id, digest)
                route = "group_feed"
            else:
                key = self.microcache.feed_key(slug, digest)
                route = "feed"

            async def fetch() -> dict:
                result = await self.feed_service.run_feed_query(
                    company.id,
                    scope,
                    request.filters,
                    group_id=group_id,
                    requester_id=requester_id,
                    route=route,
                )
                return result.model_dump(mode="json")

            lookup = await self.microcache.get_or_set(
                key,
                self.microcache.compute_ttl(request.path or "/feed"),
                fetch,
            )
            result = FeedResult.model_validate(lookup.value)
            logfire.info("Feed served", cache_hit=lookup.from_cache, total=result.total)

            return ListFeedResponse(
                posts=result.posts,
                total=result.total,
                total_pages=result.total_pages,
                page=result.page,
                limit=result.limit,
                cache_hit=lookup.from_cache,
            )
