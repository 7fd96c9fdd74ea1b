"""Retention sweep domain service."""

from datetime import timedelta
from typing import List

import logfire

from huddle.domain.model.common import utcnow
from huddle.domain.model.company import Company
from huddle.domain.repository import (
    AttachmentRepository,
    CommentRepository,
    CompanyRepository,
    PostRepository,
    ReactionRepository,
)
from huddle.domain.value import CompanyId, TargetType
from huddle.domain.value.common import ValueObject

from .base import Service


class RetentionReport(ValueObject):
    """Rows removed by one retention sweep of a tenant."""

    company_id: CompanyId
    posts: int = 0
    comments: int = 0
    reactions: int = 0
    attachments: int = 0

    @property
    def total(self) -> int:
        return self.posts + self.comments + self.reactions + self.attachments


class RetentionService(Service):
    """Hard-deletes soft-deleted content past the tenant's retention window."""

    def __init__(
        self,
        company_repository: CompanyRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        reaction_repository: ReactionRepository,
        attachment_repository: AttachmentRepository,
    ) -> None:
        """Initialize retention service.

        Args:
            company_repository: Company repository
            post_repository: Post repository
            comment_repository: Comment repository
            reaction_repository: Reaction repository
            attachment_repository: Attachment repository
        """
        self.company_repository = company_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository
        self.reaction_repository = reaction_repository
        self.attachment_repository = attachment_repository

    async def purge_for_company(self, company: Company) -> RetentionReport:
        """Purge one tenant.

        Posts soft-deleted before ``now - retention_days`` go away together
        with their comments, reactions and attachments. Comments soft-deleted
        before the same cutoff are removed as well.

        Args:
            company: Tenant to sweep

        Returns:
            Counts of removed rows
        """
        cutoff = utcnow() - timedelta(days=company.policies.retention_days)
        with logfire.span(
            "retention.purge_for_company",
            company_id=str(company.id),
            cutoff=cutoff.isoformat(),
        ):
            post_ids = await self.post_repository.find_purgeable_ids(company.id, cutoff)
            reactions = attachments = comments = posts = 0

            if post_ids:
                comment_ids = await self.comment_repository.find_ids_for_posts(post_ids)
                reactions += await self.reaction_repository.delete_for_targets(
                    TargetType.POST, post_ids
                )
                if comment_ids:
                    reactions += await self.reaction_repository.delete_for_targets(
                        TargetType.COMMENT, comment_ids
                    )
                attachments = await self.attachment_repository.delete_for_posts(post_ids)
                comments = await self.comment_repository.delete_for_posts(post_ids)
                posts = await self.post_repository.delete_many(post_ids)

            comments += await self.comment_repository.purge_deleted(company.id, cutoff)

            report = RetentionReport(
                company_id=company.id,
                posts=posts,
                comments=comments,
                reactions=reactions,
                attachments=attachments,
            )
            logfire.info(
                "Retention sweep finished",
                company_id=str(company.id),
                posts=posts,
                comments=comments,
                reactions=reactions,
                attachments=attachments,
            )
            return report

    async def purge_all_companies(self) -> List[RetentionReport]:
        """Run the sweep for every active tenant."""
        companies = await self.company_repository.find_active()
        return [await self.purge_for_company(company) for company in companies]
