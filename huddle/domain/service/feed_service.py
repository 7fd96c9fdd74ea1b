"""Feed query engine.

Builds a tenant-scoped, filtered, ranked and paginated page of posts and
enriches it for display. Ranking without a text query is pinned first,
then open polls, then newest (ID breaks remaining ties). With a text query
the full-text index is tried first; if it fails for any reason the engine
silently falls back to a case-insensitive substring scan ranked by recency.
"""

import asyncio
import math
import time
from datetime import date, datetime, time as dtime, timezone
from typing import List, Optional, Tuple

import logfire

from huddle.config import FeedSettings
from huddle.domain.error import ValidationError
from huddle.domain.model.feed import FeedFilters, FeedItem, FeedResult, clamp_limit
from huddle.domain.model.perf import PerfSample
from huddle.domain.model.post import Post
from huddle.domain.repository import (
    AttachmentRepository,
    FeedSearchMode,
    FeedSpec,
    GroupRepository,
    PostRepository,
    UserRepository,
)
from huddle.domain.value import (
    CompanyId,
    FeedScope,
    FeedTab,
    GroupId,
    PostType,
    UserId,
)
from huddle.util.text import make_excerpt, strip_markup

from .base import Service
from .perf_service import PerfRecorder

# Timestamps carry microseconds
END_OF_DAY = dtime.max


def start_of_day(day: date) -> datetime:
    """00:00:00.000 UTC of a calendar day."""
    return datetime.combine(day, dtime.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """23:59:59.999999 UTC of a calendar day (inclusive upper bound)."""
    return datetime.combine(day, END_OF_DAY, tzinfo=timezone.utc)


class FeedService(Service):
    """Domain service running feed queries."""

    def __init__(
        self,
        post_repository: PostRepository,
        user_repository: UserRepository,
        group_repository: GroupRepository,
        attachment_repository: AttachmentRepository,
        perf_recorder: PerfRecorder,
        feed_settings: FeedSettings,
    ) -> None:
        """Initialize feed service.

        Args:
            post_repository: Post repository
            user_repository: User repository (people filter)
            group_repository: Group repository (my-groups filter, stubs)
            attachment_repository: Attachment repository (thumbnails)
            perf_recorder: Sink for query timings
            feed_settings: Pagination and enrichment settings
        """
        self.post_repository = post_repository
        self.user_repository = user_repository
        self.group_repository = group_repository
        self.attachment_repository = attachment_repository
        self.perf_recorder = perf_recorder
        self.feed_settings = feed_settings

    def effective_limit(self, filters: FeedFilters) -> int:
        """Page size after defaulting and clamping."""
        return clamp_limit(
            filters.limit,
            default=self.feed_settings.default_limit,
            low=self.feed_settings.min_limit,
            high=self.feed_settings.max_limit,
        )

    async def run_feed_query(
        self,
        company_id: CompanyId,
        scope: FeedScope,
        filters: FeedFilters,
        group_id: Optional[GroupId] = None,
        requester_id: Optional[UserId] = None,
        route: str = "feed",
    ) -> FeedResult:
        """Run a feed query.

        Args:
            company_id: Tenant
            scope: Company-wide or single group
            filters: Normalized filters
            group_id: Group pinned by GROUP scope
            requester_id: Member asking (used by the my-groups filter)
            route: Route tag for the perf sample

        Returns:
            One page of enriched feed items

        Raises:
            ValidationError: If GROUP scope is requested without a group
        """
        if scope == FeedScope.GROUP and group_id is None:
            raise ValidationError("Group feeds need a group")

        started = time.perf_counter()
        page = filters.page
        limit = self.effective_limit(filters)

        with logfire.span(
            "feed.run_query",
            company_id=str(company_id),
            scope=scope.value,
            group_id=str(group_id) if group_id else None,
            has_query=bool(filters.q),
            page=page,
            limit=limit,
        ):
            spec = await self.build_spec(
                company_id, scope, filters, group_id=group_id, requester_id=requester_id
            )

            if spec.matches_nothing:
                posts, total = [], 0
            else:
                posts, total = await self._search(spec, limit, (page - 1) * limit)

            items = await self._enrich(company_id, posts, filters.q)

            result = FeedResult(
                posts=items,
                total=total,
                total_pages=max(1, math.ceil(total / limit)),
                page=page,
                limit=limit,
            )
            logfire.info("Feed query served", total=total, count=len(items))

        self._record(route, started, company_id, len(items), page, limit)
        return result

    async def build_spec(
        self,
        company_id: CompanyId,
        scope: FeedScope,
        filters: FeedFilters,
        group_id: Optional[GroupId] = None,
        requester_id: Optional[UserId] = None,
    ) -> FeedSpec:
        """Translate filters into a repository match criteria.

        Precedence: ``type`` over ``tab``, ``author_id`` over ``people``.
        ``my_groups`` only applies to company feeds.

        Args:
            company_id: Tenant
            scope: Company-wide or single group
            filters: Normalized filters
            group_id: Group pinned by GROUP scope
            requester_id: Member asking

        Returns:
            Feed match criteria
        """
        post_type: Optional[PostType] = None
        exclude_type: Optional[PostType] = None
        if filters.type is not None:
            post_type = filters.type
        elif filters.tab == FeedTab.ANNOUNCEMENTS:
            post_type = PostType.ANNOUNCEMENT
        elif filters.tab == FeedTab.REGULAR:
            exclude_type = PostType.ANNOUNCEMENT

        author_ids: Optional[List[UserId]] = None
        if filters.author_id is not None:
            author_ids = [filters.author_id]
        elif filters.people:
            author_ids = await self.user_repository.find_ids_matching(
                company_id, filters.people
            )

        group_ids: Optional[List[GroupId]] = None
        if scope == FeedScope.COMPANY and filters.my_groups:
            if requester_id is None:
                group_ids = []
            else:
                group_ids = await self.group_repository.find_ids_for_member(
                    company_id, requester_id
                )

        return FeedSpec(
            company_id=company_id,
            group_id=group_id if scope == FeedScope.GROUP else None,
            group_ids=group_ids,
            type=post_type,
            exclude_type=exclude_type,
            author_ids=author_ids,
            created_from=start_of_day(filters.from_date) if filters.from_date else None,
            created_to=end_of_day(filters.to_date) if filters.to_date else None,
            search=filters.q,
        )

    async def _search(
        self, spec: FeedSpec, limit: int, offset: int
    ) -> Tuple[List[Post], int]:
        if not spec.search:
            return await self._fetch(spec.with_search_mode(FeedSearchMode.NONE), limit, offset)

        try:
            return await self._fetch(
                spec.with_search_mode(FeedSearchMode.FULL_TEXT), limit, offset
            )
        except Exception as e:
            logfire.info(
                "Full-text search failed, using substring scan",
                error=str(e),
                error_type=type(e).__name__,
            )
        return await self._fetch(
            spec.with_search_mode(FeedSearchMode.SUBSTRING), limit, offset
        )

    async def _fetch(
        self, spec: FeedSpec, limit: int, offset: int
    ) -> Tuple[List[Post], int]:
        posts, total = await asyncio.gather(
            self.post_repository.find_feed(spec, limit=limit, offset=offset),
            self.post_repository.count_feed(spec),
        )
        return posts, total

    async def _enrich(
        self, company_id: CompanyId, posts: List[Post], term: Optional[str]
    ) -> List[FeedItem]:
        if not posts:
            return []

        post_ids = [post.id for post in posts]
        group_ids = list(dict.fromkeys(p.group_id for p in posts if p.group_id))

        thumbnails, stubs = await asyncio.gather(
            self.attachment_repository.find_thumbnails(
                company_id, post_ids, per_post=self.feed_settings.max_thumbnails
            ),
            self.group_repository.find_stubs(company_id, group_ids),
        )

        items = []
        for post in posts:
            excerpt = None
            if term:
                excerpt = make_excerpt(strip_markup(post.rich_text), term)
            items.append(
                FeedItem(
                    post=post,
                    thumbnails=thumbnails.get(post.id, [])[
                        : self.feed_settings.max_thumbnails
                    ],
                    group=stubs.get(post.group_id) if post.group_id else None,
                    excerpt=excerpt,
                )
            )
        return items

    def _record(
        self,
        route: str,
        started: float,
        company_id: CompanyId,
        count: int,
        page: int,
        limit: int,
    ) -> None:
        try:
            self.perf_recorder.record(
                PerfSample(
                    route=route,
                    duration_ms=(time.perf_counter() - started) * 1000,
                    count=count,
                    page=page,
                    limit=limit,
                    company_id=company_id,
                )
            )
        except Exception as e:
            logfire.warn("Perf sample not recorded", route=route, error=str(e))
