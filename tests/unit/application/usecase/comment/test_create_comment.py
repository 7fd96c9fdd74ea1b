"""Unit tests for the comment use cases."""

import pytest

from huddle.application.usecase.comment.create_comment import (
    CreateCommentRequest,
    CreateCommentUseCase,
)
from huddle.application.usecase.comment.delete_comment import (
    DeleteCommentRequest,
    DeleteCommentUseCase,
)
from huddle.domain.repository import (
    CompanyRepository,
    PointEventRepository,
    PostRepository,
    UserRepository,
)
from huddle.domain.service import (
    CommentService,
    CompanyService,
    MicrocacheService,
    PointsService,
    PostService,
)
from huddle.domain.value import CommentStatus, PointAction
from tests.conftest import make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def build(unit_env):
    company_repo = await unit_env.get(CompanyRepository)
    user_repo = await unit_env.get(UserRepository)
    post_repo = await unit_env.get(PostRepository)
    company = await company_repo.save(make_company())
    author = await user_repo.save(make_user(company))
    commenter = await user_repo.save(make_user(company, "Grace Hopper"))
    post = await post_repo.save(make_post(company, author))
    use_case = CreateCommentUseCase(
        company_service=await unit_env.get(CompanyService),
        comment_service=await unit_env.get(CommentService),
        points_service=await unit_env.get(PointsService),
        microcache=await unit_env.get(MicrocacheService),
    )
    return use_case, company, author, commenter, post


class TestCreateCommentUseCase:
    """Tests for CreateCommentUseCase."""

    @pytest.mark.asyncio
    async def test_comment_scores_both_sides(self, unit_env):
        """The commenter earns COMMENT_CREATED, the post author COMMENT_RECEIVED."""
        # Arrange
        use_case, company, author, commenter, post = await build(unit_env)
        ledger = await unit_env.get(PointEventRepository)

        # Act
        response = await use_case.execute(
            CreateCommentRequest(
                org="acme", user_id=commenter.id, post_id=post.id, content="Great!"
            )
        )

        # Assert
        assert response.comment.level == 0
        assert {(e.user_id, e.action, e.points) for e in ledger.events} == {
            (commenter.id, PointAction.COMMENT_CREATED, 2),
            (author.id, PointAction.COMMENT_RECEIVED, 1),
        }

    @pytest.mark.asyncio
    async def test_reply_scores_parent_author(self, unit_env):
        """Replies credit the parent comment's author, not the post author."""
        # Arrange
        use_case, company, author, commenter, post = await build(unit_env)
        ledger = await unit_env.get(PointEventRepository)
        top = await use_case.execute(
            CreateCommentRequest(
                org="acme", user_id=commenter.id, post_id=post.id, content="Q?"
            )
        )

        # Act
        reply = await use_case.execute(
            CreateCommentRequest(
                org="acme",
                user_id=author.id,
                post_id=post.id,
                content="A.",
                parent_comment_id=top.comment.comment_id,
            )
        )

        # Assert
        assert reply.comment.level == 1
        reply_events = [
            e for e in ledger.events if str(e.meta.comment_id) == reply.comment.comment_id
        ]
        assert {(e.user_id, e.action) for e in reply_events} == {
            (author.id, PointAction.REPLY_CREATED),
            (commenter.id, PointAction.REPLY_RECEIVED),
        }

    @pytest.mark.asyncio
    async def test_own_post_comment_has_no_received_points(self, unit_env):
        use_case, company, author, _, post = await build(unit_env)
        ledger = await unit_env.get(PointEventRepository)

        await use_case.execute(
            CreateCommentRequest(org="acme", user_id=author.id, post_id=post.id, content="+1")
        )

        assert [e.action for e in ledger.events] == [PointAction.COMMENT_CREATED]


class TestDeleteCommentUseCase:
    """Tests for DeleteCommentUseCase."""

    @pytest.mark.asyncio
    async def test_delete_leaves_placeholder(self, unit_env):
        # Arrange
        use_case, _, _, commenter, post = await build(unit_env)
        delete_comment = DeleteCommentUseCase(
            company_service=await unit_env.get(CompanyService),
            comment_service=await unit_env.get(CommentService),
            post_service=await unit_env.get(PostService),
            microcache=await unit_env.get(MicrocacheService),
        )
        post_repo = await unit_env.get(PostRepository)
        created = await use_case.execute(
            CreateCommentRequest(
                org="acme", user_id=commenter.id, post_id=post.id, content="oops"
            )
        )

        # Act
        response = await delete_comment.execute(
            DeleteCommentRequest(
                org="acme", user_id=commenter.id, comment_id=created.comment.comment_id
            )
        )

        # Assert
        assert response.comment.status == CommentStatus.DELETED
        assert (await post_repo.find_by_id(post.id)).comments_count == 0
