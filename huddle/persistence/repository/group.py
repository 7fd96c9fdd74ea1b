"""PostgreSQL implementation of Group repository."""

from typing import Dict, List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from huddle.domain.model import Group, GroupStub
from huddle.domain.repository import GroupRepository
from huddle.domain.value import CompanyId, GroupId, UserId
from huddle.persistence.database import read_session
from huddle.persistence.mappers import group_to_dict, row_to_group
from huddle.persistence.tables import groups_table


class PostgresGroupRepository(GroupRepository):
    """PostgreSQL implementation of GroupRepository."""

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

    async def find_by_id(self, group_id: GroupId) -> Optional[Group]:
        """Find a group by ID."""
        stmt = select(groups_table).where(groups_table.c.id == group_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_group(row._asdict()) if row else None

    async def find_ids_for_member(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[GroupId]:
        """Find the groups a user owns, moderates or belongs to."""
        stmt = select(groups_table.c.id).where(
            groups_table.c.company_id == company_id,
            or_(
                groups_table.c.owner_ids.any(user_id),
                groups_table.c.moderator_ids.any(user_id),
                groups_table.c.member_ids.any(user_id),
            ),
        )
        result = await self.session.execute(stmt)
        return [GroupId(row.id) for row in result.fetchall()]

    async def find_stubs(
        self, company_id: CompanyId, group_ids: Sequence[GroupId]
    ) -> Dict[GroupId, GroupStub]:
        """Fetch id/name stubs for several groups in one query.

        Runs on its own session so it can overlap with other feed reads.
        """
        if not group_ids:
            return {}

        stmt = select(groups_table.c.id, groups_table.c.name).where(
            groups_table.c.company_id == company_id,
            groups_table.c.id.in_(list(group_ids)),
        )
        async with read_session(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.fetchall()

        return {GroupId(row.id): GroupStub(id=row.id, name=row.name) for row in rows}

    async def save(self, group: Group) -> Group:
        """Save a group (create or update)."""
        existing = await self.find_by_id(group.id)
        group_dict = group_to_dict(group)

        if existing:
            stmt = (
                groups_table.update()
                .where(groups_table.c.id == group.id)
                .values(**group_dict)
            )
        else:
            stmt = groups_table.insert().values(**group_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return group
