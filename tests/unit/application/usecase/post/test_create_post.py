"""Unit tests for the post lifecycle use cases."""

from uuid import uuid4

import pytest

from huddle.application.usecase.post.create_post import (
    CreatePostRequest,
    CreatePostUseCase,
    PollInput,
    PollQuestionInput,
)
from huddle.application.usecase.post.delete_post import (
    DeletePostRequest,
    DeletePostUseCase,
)
from huddle.application.usecase.post.get_post import GetPostRequest, GetPostUseCase
from huddle.application.usecase.post.moderate_post import (
    ModeratePostRequest,
    ModeratePostUseCase,
    ModerationDecision,
)
from huddle.domain.error import NotAuthorizedError, NotFoundError
from huddle.domain.repository import (
    CompanyRepository,
    PointEventRepository,
    UserRepository,
)
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    PointsService,
    PostService,
)
from huddle.domain.value import PointAction, PostingMode, PostStatus, PostType, UserRole
from tests.conftest import make_company, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def post_use_cases(unit_env):
    company_service = await unit_env.get(CompanyService)
    post_service = await unit_env.get(PostService)
    points_service = await unit_env.get(PointsService)
    microcache = await unit_env.get(MicrocacheService)
    return (
        CreatePostUseCase(
            company_service=company_service,
            post_service=post_service,
            points_service=points_service,
            microcache=microcache,
        ),
        ModeratePostUseCase(
            company_service=company_service,
            post_service=post_service,
            points_service=points_service,
            microcache=microcache,
        ),
    )


async def seed(unit_env, posting_mode=PostingMode.OPEN):
    company_repo = await unit_env.get(CompanyRepository)
    user_repo = await unit_env.get(UserRepository)
    company = await company_repo.save(make_company(posting_mode=posting_mode))
    member = await user_repo.save(make_user(company))
    moderator = await user_repo.save(
        make_user(company, "Mo Derator", role=UserRole.MODERATOR)
    )
    return company, member, moderator


class TestCreatePostUseCase:
    """Tests for CreatePostUseCase."""

    @pytest.mark.asyncio
    async def test_published_post_earns_points(self, unit_env):
        """Open tenants publish at once and credit the author."""
        # Arrange
        create_post, _ = await post_use_cases(unit_env)
        ledger = await unit_env.get(PointEventRepository)
        company, member, _ = await seed(unit_env)

        # Act
        response = await create_post.execute(
            CreatePostRequest(org="acme", user_id=member.id, rich_text="<p>Hello</p>")
        )

        # Assert
        assert response.post.status == PostStatus.PUBLISHED
        assert [(e.action, e.points) for e in ledger.events] == [
            (PointAction.POST_CREATED, 5)
        ]

    @pytest.mark.asyncio
    async def test_poll_post(self, unit_env):
        """Poll input becomes a poll with fresh IDs and zero tallies."""
        create_post, _ = await post_use_cases(unit_env)
        _, member, _ = await seed(unit_env)

        response = await create_post.execute(
            CreatePostRequest(
                org="acme",
                user_id=member.id,
                type=PostType.POLL,
                rich_text="<p>Vote!</p>",
                poll=PollInput(
                    questions=[PollQuestionInput(text="Tea or coffee?", options=["Tea", "Coffee"])]
                ),
            )
        )

        poll = response.post.poll
        assert len(poll.questions) == 1
        assert [o.label for o in poll.questions[0].options] == ["Tea", "Coffee"]
        assert all(o.votes_count == 0 for o in poll.questions[0].options)

    @pytest.mark.asyncio
    async def test_outsider_cannot_post(self, unit_env):
        """Members of another tenant are refused."""
        create_post, _ = await post_use_cases(unit_env)
        company_repo = await unit_env.get(CompanyRepository)
        user_repo = await unit_env.get(UserRepository)
        await seed(unit_env)
        globex = await company_repo.save(make_company("globex"))
        outsider = await user_repo.save(make_user(globex))

        with pytest.raises(NotAuthorizedError):
            await create_post.execute(
                CreatePostRequest(org="acme", user_id=outsider.id, rich_text="<p>x</p>")
            )


class TestModeratePostUseCase:
    """Tests for ModeratePostUseCase."""

    @pytest.mark.asyncio
    async def test_points_are_credited_on_approval(self, unit_env):
        """Queued posts score only once approved."""
        # Arrange
        create_post, moderate_post = await post_use_cases(unit_env)
        ledger = await unit_env.get(PointEventRepository)
        _, member, moderator = await seed(unit_env, PostingMode.MODERATED)
        created = await create_post.execute(
            CreatePostRequest(org="acme", user_id=member.id, rich_text="<p>Hello</p>")
        )
        assert created.post.status == PostStatus.QUEUED
        assert ledger.events == []

        # Act
        approved = await moderate_post.execute(
            ModeratePostRequest(
                org="acme",
                user_id=moderator.id,
                post_id=created.post.post_id,
                decision=ModerationDecision.APPROVE,
            )
        )

        # Assert
        assert approved.post.status == PostStatus.PUBLISHED
        assert len(ledger.events) == 1
        assert ledger.events[0].user_id == member.id

    @pytest.mark.asyncio
    async def test_rejection_earns_nothing(self, unit_env):
        create_post, moderate_post = await post_use_cases(unit_env)
        ledger = await unit_env.get(PointEventRepository)
        _, member, moderator = await seed(unit_env, PostingMode.MODERATED)
        created = await create_post.execute(
            CreatePostRequest(org="acme", user_id=member.id, rich_text="<p>Hello</p>")
        )

        rejected = await moderate_post.execute(
            ModeratePostRequest(
                org="acme",
                user_id=moderator.id,
                post_id=created.post.post_id,
                decision=ModerationDecision.REJECT,
            )
        )

        assert rejected.post.status == PostStatus.REJECTED
        assert ledger.events == []


class TestGetAndDeletePost:
    """Tests for GetPostUseCase and DeletePostUseCase."""

    @pytest.mark.asyncio
    async def test_delete_busts_cached_post(self, unit_env):
        """A cached post view disappears once the post is deleted."""
        # Arrange
        create_post, _ = await post_use_cases(unit_env)
        company_service = await unit_env.get(CompanyService)
        post_service = await unit_env.get(PostService)
        microcache = await unit_env.get(MicrocacheService)
        get_post = GetPostUseCase(
            company_service=company_service,
            post_service=post_service,
            microcache=microcache,
        )
        delete_post = DeletePostUseCase(
            company_service=company_service,
            post_service=post_service,
            microcache=microcache,
        )
        _, member, _ = await seed(unit_env)
        created = await create_post.execute(
            CreatePostRequest(org="acme", user_id=member.id, rich_text="<p>Hello</p>")
        )
        post_id = created.post.post_id
        first = await get_post.execute(GetPostRequest(org="acme", post_id=post_id))
        second = await get_post.execute(GetPostRequest(org="acme", post_id=post_id))

        # Act
        await delete_post.execute(
            DeletePostRequest(org="acme", user_id=member.id, post_id=post_id)
        )

        # Assert
        assert first.cache_hit is False
        assert second.cache_hit is True
        with pytest.raises(NotFoundError):
            await get_post.execute(GetPostRequest(org="acme", post_id=post_id))

    @pytest.mark.asyncio
    async def test_unknown_post(self, unit_env):
        get_post = GetPostUseCase(
            company_service=await unit_env.get(CompanyService),
            post_service=await unit_env.get(PostService),
            microcache=await unit_env.get(MicrocacheService),
        )
        await seed(unit_env)

        with pytest.raises(NotFoundError):
            await get_post.execute(GetPostRequest(org="acme", post_id=uuid4()))
