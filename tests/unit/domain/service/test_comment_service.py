"""Unit tests for CommentService."""

import pytest

from huddle.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from huddle.domain.model.comment import DELETED_PLACEHOLDER
from huddle.domain.repository import CommentRepository, PostRepository
from huddle.domain.service import CommentService
from huddle.domain.value import UserRole
from tests.conftest import make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestCreateComment:
    """Tests for comments and replies."""

    @pytest.mark.asyncio
    async def test_comment_and_reply_update_counters(self, unit_env):
        """Comments bump the post counter; replies also bump the parent."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        company = make_company()
        author, replier = make_user(company), make_user(company, "Grace Hopper")
        post = await post_repo.save(make_post(company, author))

        # Act
        top, _, parent = await comment_service.create_comment(
            company, author, post.id, "  First!  "
        )
        reply, _, reply_parent = await comment_service.create_comment(
            company, replier, post.id, "Welcome", parent_comment_id=top.id
        )

        # Assert
        assert top.content == "First!"
        assert top.level == 0
        assert parent is None
        assert reply.level == 1
        assert reply_parent.id == top.id
        assert (await post_repo.find_by_id(post.id)).comments_count == 2
        assert (await comment_repo.find_by_id(top.id)).replies_count == 1

    @pytest.mark.asyncio
    async def test_replies_cannot_nest(self, unit_env):
        """Replying to a reply is rejected."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author = make_user(company)
        post = await post_repo.save(make_post(company, author))
        top, _, _ = await comment_service.create_comment(company, author, post.id, "a")
        reply, _, _ = await comment_service.create_comment(
            company, author, post.id, "b", parent_comment_id=top.id
        )

        # Act / Assert
        with pytest.raises(BusinessRuleViolationError):
            await comment_service.create_comment(
                company, author, post.id, "c", parent_comment_id=reply.id
            )

    @pytest.mark.asyncio
    async def test_blank_comment_rejected(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author = make_user(company)
        post = await post_repo.save(make_post(company, author))

        with pytest.raises(ValidationError):
            await comment_service.create_comment(company, author, post.id, "   ")

    @pytest.mark.asyncio
    async def test_foreign_post_not_found(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        acme, globex = make_company("acme"), make_company("globex")
        post = await post_repo.save(make_post(globex, make_user(globex)))

        with pytest.raises(NotFoundError):
            await comment_service.create_comment(acme, make_user(acme), post.id, "hi")


class TestDeleteComment:
    """Tests for soft deletion."""

    @pytest.mark.asyncio
    async def test_author_deletes_once(self, unit_env):
        """Deleting leaves a placeholder and decrements counters once."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        company = make_company()
        author = make_user(company)
        post = await post_repo.save(make_post(company, author))
        top, _, _ = await comment_service.create_comment(company, author, post.id, "a")
        reply, _, _ = await comment_service.create_comment(
            company, author, post.id, "b", parent_comment_id=top.id
        )

        # Act
        deleted = await comment_service.delete_comment(company, author, reply.id)
        await comment_service.delete_comment(company, author, reply.id)

        # Assert
        assert deleted.is_deleted
        assert deleted.content == DELETED_PLACEHOLDER
        assert (await post_repo.find_by_id(post.id)).comments_count == 1
        assert (await comment_repo.find_by_id(top.id)).replies_count == 0

    @pytest.mark.asyncio
    async def test_other_member_cannot_delete(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author, other = make_user(company), make_user(company, "Grace Hopper")
        post = await post_repo.save(make_post(company, author))
        comment, _, _ = await comment_service.create_comment(
            company, author, post.id, "mine"
        )

        with pytest.raises(NotAuthorizedError):
            await comment_service.delete_comment(company, other, comment.id)

    @pytest.mark.asyncio
    async def test_moderator_can_delete(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author = make_user(company)
        moderator = make_user(company, "Mo Derator", role=UserRole.MODERATOR)
        post = await post_repo.save(make_post(company, author))
        comment, _, _ = await comment_service.create_comment(
            company, author, post.id, "spam"
        )

        deleted = await comment_service.delete_comment(company, moderator, comment.id)

        assert deleted.is_deleted

    @pytest.mark.asyncio
    async def test_cannot_reply_to_deleted_comment(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author = make_user(company)
        post = await post_repo.save(make_post(company, author))
        top, _, _ = await comment_service.create_comment(company, author, post.id, "a")
        await comment_service.delete_comment(company, author, top.id)

        with pytest.raises(BusinessRuleViolationError):
            await comment_service.create_comment(
                company, author, post.id, "b", parent_comment_id=top.id
            )
