"""Unit tests for RetentionService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from huddle.domain.model import Attachment, Comment, Reaction
from huddle.domain.model.common import utcnow
from huddle.domain.repository import (
    AttachmentRepository,
    CommentRepository,
    CompanyRepository,
    PostRepository,
    ReactionRepository,
)
from huddle.domain.service import RetentionService
from huddle.domain.value import (
    AttachmentId,
    CommentId,
    CommentStatus,
    ReactionId,
    ReactionType,
    TargetType,
)
from tests.conftest import make_company, make_post, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestPurgeForCompany:
    """Tests for the per-tenant sweep."""

    @pytest.mark.asyncio
    async def test_purges_expired_posts_with_dependents(self, unit_env):
        """Old soft-deleted posts go with their comments, reactions and files."""
        # Arrange
        retention_service = await unit_env.get(RetentionService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        reaction_repo = await unit_env.get(ReactionRepository)
        attachment_repo = await unit_env.get(AttachmentRepository)
        company = make_company(retention_days=30)
        author = make_user(company)

        expired = await post_repo.save(
            make_post(company, author, deleted_at=utcnow() - timedelta(days=31))
        )
        recent = await post_repo.save(
            make_post(company, author, deleted_at=utcnow() - timedelta(days=5))
        )
        live = await post_repo.save(make_post(company, author))

        comment = await comment_repo.save(
            Comment(
                id=CommentId(uuid4()),
                company_id=company.id,
                post_id=expired.id,
                author_id=author.id,
                content="bye",
            )
        )
        for target_type, target_id in (
            (TargetType.POST, expired.id),
            (TargetType.COMMENT, comment.id),
            (TargetType.POST, live.id),
        ):
            await reaction_repo.save(
                Reaction(
                    id=ReactionId(uuid4()),
                    company_id=company.id,
                    user_id=make_user(company).id,
                    target_type=target_type,
                    target_id=target_id,
                    type=ReactionType.LIKE,
                )
            )
        await attachment_repo.save(
            Attachment(
                id=AttachmentId(uuid4()),
                company_id=company.id,
                target_type=TargetType.POST,
                target_id=expired.id,
                storage_url="https://cdn.example/a.png",
            )
        )

        # Act
        report = await retention_service.purge_for_company(company)

        # Assert
        assert report.posts == 1
        assert report.comments == 1
        assert report.reactions == 2
        assert report.attachments == 1
        assert report.total == 5
        assert await post_repo.find_by_id(expired.id) is None
        assert await post_repo.find_by_id(recent.id) is not None
        assert await post_repo.find_by_id(live.id) is not None

    @pytest.mark.asyncio
    async def test_purges_old_deleted_comments_with_replies(self, unit_env):
        """Expired deleted comments on live posts are removed with replies."""
        # Arrange
        retention_service = await unit_env.get(RetentionService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(CommentRepository)
        company = make_company(retention_days=30)
        author = make_user(company)
        post = await post_repo.save(make_post(company, author))
        parent = await comment_repo.save(
            Comment(
                id=CommentId(uuid4()),
                company_id=company.id,
                post_id=post.id,
                author_id=author.id,
                content="(deleted)",
                status=CommentStatus.DELETED,
                deleted_at=utcnow() - timedelta(days=40),
            )
        )
        await comment_repo.save(
            Comment(
                id=CommentId(uuid4()),
                company_id=company.id,
                post_id=post.id,
                author_id=author.id,
                content="reply",
                parent_comment_id=parent.id,
                level=1,
            )
        )

        # Act
        report = await retention_service.purge_for_company(company)

        # Assert
        assert report.posts == 0
        assert report.comments == 2
        assert await comment_repo.find_by_id(parent.id) is None

    @pytest.mark.asyncio
    async def test_purge_all_skips_inactive_tenants(self, unit_env):
        """Only active tenants are swept."""
        retention_service = await unit_env.get(RetentionService)
        company_repo = await unit_env.get(CompanyRepository)
        active = make_company("acme")
        inactive = make_company("globex").model_copy(update={"is_active": False})
        await company_repo.save(active)
        await company_repo.save(inactive)

        reports = await retention_service.purge_all_companies()

        assert [r.company_id for r in reports] == [active.id]
        assert reports[0].total == 0
