"""PostgreSQL implementation of Comment repository."""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.domain.model import Comment
from huddle.domain.repository import CommentRepository
from huddle.domain.value import CommentId, CommentStatus, CompanyId, PostId
from huddle.persistence.mappers import comment_to_dict, row_to_comment
from huddle.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = await self.find_by_id(comment.id)
        comment_dict = comment_to_dict(comment)

        if existing:
            # Reply counter is maintained by atomic increments only
            comment_dict.pop("replies_count")
            stmt = (
                update(comments_table)
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> None:
        """Atomically adjust the reply counter (minimum 0)."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.id == comment_id)
            .values(
                replies_count=func.greatest(comments_table.c.replies_count + delta, 0)
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def find_ids_for_posts(self, post_ids: Sequence[PostId]) -> List[CommentId]:
        """List the IDs of every comment on the given posts."""
        if not post_ids:
            return []
        stmt = select(comments_table.c.id).where(
            comments_table.c.post_id.in_(list(post_ids))
        )
        result = await self.session.execute(stmt)
        return [CommentId(row.id) for row in result.fetchall()]

    async def delete_for_posts(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete every comment on the given posts."""
        if not post_ids:
            return 0
        stmt = delete(comments_table).where(comments_table.c.post_id.in_(list(post_ids)))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0

    async def purge_deleted(self, company_id: CompanyId, deleted_before: datetime) -> int:
        """Hard-delete comments soft-deleted before the cutoff.

        Replies of a purged comment go with it (ON DELETE CASCADE).
        """
        stmt = delete(comments_table).where(
            comments_table.c.company_id == company_id,
            comments_table.c.status == CommentStatus.DELETED.value,
            comments_table.c.deleted_at < deleted_before,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
