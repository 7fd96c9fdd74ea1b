"""PostgreSQL implementation of User repository."""

from typing import List, Optional, Sequence

import logfire
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.domain.model import User
from huddle.domain.repository import UserRepository
from huddle.domain.value import CompanyId, UserId
from huddle.persistence.mappers import row_to_user, user_to_dict
from huddle.persistence.tables import users_table


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally (escape char ``\\``)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_user(row._asdict()) if row else None

    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        """Find several users at once."""
        if not user_ids:
            return []
        stmt = select(users_table).where(users_table.c.id.in_(list(user_ids)))
        result = await self.session.execute(stmt)
        return [row_to_user(row._asdict()) for row in result.fetchall()]

    async def find_ids_matching(self, company_id: CompanyId, text: str) -> List[UserId]:
        """Find users whose full name or title contains the text."""
        with logfire.span("user_repository.find_ids_matching", company_id=str(company_id)):
            pattern = f"%{escape_like(text)}%"
            stmt = select(users_table.c.id).where(
                users_table.c.company_id == company_id,
                or_(
                    users_table.c.full_name.ilike(pattern, escape="\\"),
                    users_table.c.title.ilike(pattern, escape="\\"),
                ),
            )
            result = await self.session.execute(stmt)
            ids = [UserId(row.id) for row in result.fetchall()]
            logfire.debug("People filter matched", count=len(ids))
            return ids

    async def save(self, user: User) -> User:
        """Save a user (create or update)."""
        existing = await self.find_by_id(user.id)
        user_dict = user_to_dict(user)

        if existing:
            stmt = (
                users_table.update()
                .where(users_table.c.id == user.id)
                .values(**user_dict)
            )
        else:
            stmt = users_table.insert().values(**user_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return user
