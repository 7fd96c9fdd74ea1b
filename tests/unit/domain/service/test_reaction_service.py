"""Unit tests for ReactionService."""

from uuid import uuid4

import pytest

from huddle.domain.error import NotFoundError
from huddle.domain.model import Comment
from huddle.domain.repository import CommentRepository, PostRepository, ReactionRepository
from huddle.domain.service import ReactionService
from huddle.domain.value import CommentId, ReactionType, TargetType
from tests.conftest import at, make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def counts(post_repo, post_id):
    post = await post_repo.find_by_id(post_id)
    return {k: v for k, v in post.reactions_count_by_type.items() if v}


class TestToggle:
    """Tests for the add / remove / switch state machine."""

    @pytest.mark.asyncio
    async def test_add_remove_switch(self, unit_env):
        """Each toggle moves the counters in step with the reaction row."""
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        post_repo = await unit_env.get(PostRepository)
        reaction_repo = await unit_env.get(ReactionRepository)
        company = make_company()
        author, reader = make_user(company), make_user(company, "Grace Hopper")
        post = await post_repo.save(make_post(company, author))

        # Act / Assert: add
        added = await reaction_service.toggle(
            company, reader, TargetType.POST, post.id, ReactionType.LIKE
        )
        assert (added.previous, added.current) == (None, ReactionType.LIKE)
        assert added.owner_id == author.id
        assert await counts(post_repo, post.id) == {ReactionType.LIKE: 1}

        # Act / Assert: switch
        switched = await reaction_service.toggle(
            company, reader, TargetType.POST, post.id, ReactionType.CELEBRATE
        )
        assert (switched.previous, switched.current) == (
            ReactionType.LIKE,
            ReactionType.CELEBRATE,
        )
        assert await counts(post_repo, post.id) == {ReactionType.CELEBRATE: 1}

        # Act / Assert: remove
        removed = await reaction_service.toggle(
            company, reader, TargetType.POST, post.id, ReactionType.CELEBRATE
        )
        assert (removed.previous, removed.current) == (ReactionType.CELEBRATE, None)
        assert removed.changed
        assert await counts(post_repo, post.id) == {}
        assert (
            await reaction_repo.find_by_user_and_target(
                reader.id, TargetType.POST, post.id
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_comment_reaction_leaves_post_counters(self, unit_env):
        """Comment reactions do not touch the post's counters."""
        # Arrange
        reaction_service = await unit_env.get(ReactionService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        company = make_company()
        author, commenter = make_user(company), make_user(company, "Grace Hopper")
        post = await post_repo.save(make_post(company, author))
        comment = await comment_repo.save(
            Comment(
                id=CommentId(uuid4()),
                company_id=company.id,
                post_id=post.id,
                author_id=commenter.id,
                content="Nice",
            )
        )

        # Act
        toggle = await reaction_service.toggle(
            company, author, TargetType.COMMENT, comment.id, ReactionType.THANKS
        )

        # Assert
        assert toggle.owner_id == commenter.id
        assert toggle.comment_id == comment.id
        assert toggle.post.id == post.id
        assert await counts(post_repo, post.id) == {}

    @pytest.mark.asyncio
    async def test_foreign_tenant_post_is_not_found(self, unit_env):
        """A post of another tenant cannot be reacted to."""
        reaction_service = await unit_env.get(ReactionService)
        post_repo = await unit_env.get(PostRepository)
        acme, globex = make_company("acme"), make_company("globex")
        post = await post_repo.save(make_post(globex, make_user(globex)))

        with pytest.raises(NotFoundError):
            await reaction_service.toggle(
                acme, make_user(acme), TargetType.POST, post.id, ReactionType.LIKE
            )

    @pytest.mark.asyncio
    async def test_deleted_post_is_not_found(self, unit_env):
        reaction_service = await unit_env.get(ReactionService)
        post_repo = await unit_env.get(PostRepository)
        company = make_company()
        author = make_user(company)
        post = await post_repo.save(
            make_post(company, author, deleted_at=at(2024, 1, 1))
        )

        with pytest.raises(NotFoundError):
            await reaction_service.toggle(
                company, author, TargetType.POST, post.id, ReactionType.LIKE
            )
