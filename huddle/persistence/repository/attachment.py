"""PostgreSQL implementation of Attachment repository."""

from collections import defaultdict
from typing import Dict, List, Sequence

import logfire
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from huddle.domain.model import Attachment
from huddle.domain.repository import AttachmentRepository
from huddle.domain.value import CompanyId, PostId, TargetType
from huddle.persistence.database import read_session
from huddle.persistence.mappers import attachment_to_dict
from huddle.persistence.tables import attachments_table


class PostgresAttachmentRepository(AttachmentRepository):
    """PostgreSQL implementation of AttachmentRepository."""

    def __init__(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session (request transaction)
            session_factory: Factory for independent read sessions
        """
        self.session = session
        self.session_factory = session_factory

    async def save(self, attachment: Attachment) -> Attachment:
        """Save an attachment."""
        stmt = attachments_table.insert().values(**attachment_to_dict(attachment))
        await self.session.execute(stmt)
        await self.session.flush()
        return attachment

    async def find_thumbnails(
        self, company_id: CompanyId, post_ids: Sequence[PostId], per_post: int
    ) -> Dict[PostId, List[str]]:
        """Fetch thumbnail URLs for several posts in one query.

        A window function keeps the oldest ``per_post`` attachments per post.
        """
        if not post_ids or per_post <= 0:
            return {}

        with logfire.span("attachment_repository.find_thumbnails", posts=len(post_ids)):
            position = (
                func.row_number()
                .over(
                    partition_by=attachments_table.c.target_id,
                    order_by=(attachments_table.c.created_at, attachments_table.c.id),
                )
                .label("position")
            )
            ranked = (
                select(
                    attachments_table.c.target_id,
                    attachments_table.c.storage_url,
                    position,
                )
                .where(
                    attachments_table.c.company_id == company_id,
                    attachments_table.c.target_type == TargetType.POST.value,
                    attachments_table.c.target_id.in_(list(post_ids)),
                )
                .subquery()
            )
            stmt = (
                select(ranked.c.target_id, ranked.c.storage_url)
                .where(ranked.c.position <= per_post)
                .order_by(ranked.c.target_id, ranked.c.position)
            )

            async with read_session(self.session_factory) as session:
                result = await session.execute(stmt)
                rows = result.fetchall()

            # Build lookup: post_id -> [urls]
            thumbnails: Dict[PostId, List[str]] = defaultdict(list)
            for row in rows:
                thumbnails[PostId(row.target_id)].append(row.storage_url)
            return dict(thumbnails)

    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Delete every attachment linked to the given posts."""
        if not post_ids:
            return 0
        stmt = delete(attachments_table).where(
            attachments_table.c.target_type == TargetType.POST.value,
            attachments_table.c.target_id.in_(list(post_ids)),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
