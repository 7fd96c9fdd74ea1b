"""Unit tests for ListFeedUseCase."""

from uuid import uuid4

import pytest

from huddle.application.usecase.feed.list_feed import ListFeedRequest, ListFeedUseCase
from huddle.application.usecase.post.create_post import (
    CreatePostRequest,
    CreatePostUseCase,
)
from huddle.domain.error import NotFoundError, TenantNotFoundError
from huddle.domain.model import FeedFilters, Group
from huddle.domain.repository import (
    CompanyRepository,
    GroupRepository,
    PostRepository,
    UserRepository,
)
from huddle.domain.service import (
    CompanyService,
    FeedService,
    MicrocacheService,
    PerfRecorder,
    PointsService,
    PostService,
)
from huddle.domain.value import FeedScope, GroupId, PostType
from tests.conftest import make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def build_use_case(unit_env) -> ListFeedUseCase:
    return ListFeedUseCase(
        company_service=await unit_env.get(CompanyService),
        feed_service=await unit_env.get(FeedService),
        group_repository=await unit_env.get(GroupRepository),
        microcache=await unit_env.get(MicrocacheService),
    )


async def seed_tenant(unit_env, slug="acme"):
    company_repo = await unit_env.get(CompanyRepository)
    user_repo = await unit_env.get(UserRepository)
    company = await company_repo.save(make_company(slug))
    member = await user_repo.save(make_user(company))
    return company, member


class TestListFeedUseCase:
    """Tests for ListFeedUseCase."""

    @pytest.mark.asyncio
    async def test_second_read_is_a_cache_hit(self, unit_env):
        """Identical requests within the TTL are served from the cache."""
        # Arrange
        use_case = await build_use_case(unit_env)
        post_repo = await unit_env.get(PostRepository)
        company, member = await seed_tenant(unit_env)
        await post_repo.save(make_post(company, member))
        request = ListFeedRequest(org="acme", path="/acme/feed")

        # Act
        first = await use_case.execute(request)
        second = await use_case.execute(request)

        # Assert
        assert first.cache_hit is False
        assert second.cache_hit is True
        assert first.total == second.total == 1
        assert second.posts[0].post.id == first.posts[0].post.id
        assert "cache_hit" not in second.model_dump()

    @pytest.mark.asyncio
    async def test_cache_hit_is_stale_until_busted(self, unit_env):
        """Writes through a use case bust the tenant feed."""
        # Arrange
        use_case = await build_use_case(unit_env)
        create_post = CreatePostUseCase(
            company_service=await unit_env.get(CompanyService),
            post_service=await unit_env.get(PostService),
            points_service=await unit_env.get(PointsService),
            microcache=await unit_env.get(MicrocacheService),
        )
        _, member = await seed_tenant(unit_env)
        request = ListFeedRequest(org="acme")
        empty = await use_case.execute(request)

        # Act
        await create_post.execute(
            CreatePostRequest(
                org="acme", user_id=member.id, type=PostType.TEXT, rich_text="<p>Hi</p>"
            )
        )
        after = await use_case.execute(request)

        # Assert
        assert empty.total == 0
        assert after.cache_hit is False
        assert after.total == 1

    @pytest.mark.asyncio
    async def test_tenants_do_not_share_cache_entries(self, unit_env):
        """The same filters in two tenants map to different keys."""
        # Arrange
        use_case = await build_use_case(unit_env)
        post_repo = await unit_env.get(PostRepository)
        acme, acme_member = await seed_tenant(unit_env, "acme")
        await seed_tenant(unit_env, "globex")
        await post_repo.save(make_post(acme, acme_member))

        # Act
        acme_page = await use_case.execute(ListFeedRequest(org="acme"))
        globex_page = await use_case.execute(ListFeedRequest(org="globex"))

        # Assert
        assert acme_page.total == 1
        assert globex_page.total == 0
        assert globex_page.cache_hit is False

    @pytest.mark.asyncio
    async def test_group_feed(self, unit_env):
        """Group feeds only contain the group's posts."""
        # Arrange
        use_case = await build_use_case(unit_env)
        post_repo = await unit_env.get(PostRepository)
        group_repo = await unit_env.get(GroupRepository)
        company, member = await seed_tenant(unit_env)
        group = await group_repo.save(
            Group(id=GroupId(uuid4()), company_id=company.id, name="Platform")
        )
        in_group = await post_repo.save(make_post(company, member, group_id=group.id))
        await post_repo.save(make_post(company, member))

        # Act
        response = await use_case.execute(
            ListFeedRequest(org="acme", group_id=group.id)
        )

        # Assert
        assert [item.post.id for item in response.posts] == [in_group.id]
        assert response.posts[0].group.name == "Platform"

    @pytest.mark.asyncio
    async def test_foreign_group_not_found(self, unit_env):
        use_case = await build_use_case(unit_env)
        group_repo = await unit_env.get(GroupRepository)
        await seed_tenant(unit_env, "acme")
        globex, _ = await seed_tenant(unit_env, "globex")
        group = await group_repo.save(
            Group(id=GroupId(uuid4()), company_id=globex.id, name="Sales")
        )

        with pytest.raises(NotFoundError):
            await use_case.execute(ListFeedRequest(org="acme", group_id=group.id))

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, unit_env):
        use_case = await build_use_case(unit_env)

        with pytest.raises(TenantNotFoundError):
            await use_case.execute(ListFeedRequest(org="nowhere"))

    @pytest.mark.asyncio
    async def test_feed_query_is_timed(self, unit_env):
        """A cache miss leaves a perf sample for the feed route."""
        use_case = await build_use_case(unit_env)
        perf_recorder = await unit_env.get(PerfRecorder)
        await seed_tenant(unit_env)

        await use_case.execute(ListFeedRequest(org="acme"))

        assert perf_recorder.recent(1)[0].route == "feed"


class TestCacheDigest:
    """Tests for the cache key digest."""

    @pytest.mark.asyncio
    async def test_equivalent_limits_share_a_digest(self, unit_env):
        """Limits that clamp to the same page size hash equally."""
        use_case = await build_use_case(unit_env)

        a = use_case.cache_digest(FeedScope.COMPANY, FeedFilters(limit=100), None, None)
        b = use_case.cache_digest(FeedScope.COMPANY, FeedFilters(limit=50), None, None)
        c = use_case.cache_digest(FeedScope.COMPANY, FeedFilters(limit=20), None, None)

        assert a == b
        assert a != c

    @pytest.mark.asyncio
    async def test_requester_only_matters_for_my_groups(self, unit_env):
        use_case = await build_use_case(unit_env)
        alice, bob = uuid4(), uuid4()

        assert use_case.cache_digest(
            FeedScope.COMPANY, FeedFilters(), None, alice
        ) == use_case.cache_digest(FeedScope.COMPANY, FeedFilters(), None, bob)
        assert use_case.cache_digest(
            FeedScope.COMPANY, FeedFilters(my_groups=True), None, alice
        ) != use_case.cache_digest(FeedScope.COMPANY, FeedFilters(my_groups=True), None, bob)
