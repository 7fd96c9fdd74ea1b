"""PostgreSQL implementation of Reaction repository."""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.domain.model import Reaction
from huddle.domain.repository import ReactionRepository
from huddle.domain.value import ReactionId, TargetType, UserId
from huddle.persistence.mappers import reaction_to_dict, row_to_reaction
from huddle.persistence.tables import reactions_table


class PostgresReactionRepository(ReactionRepository):
    """PostgreSQL implementation of ReactionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_user_and_target(
        self, user_id: UserId, target_type: TargetType, target_id: UUID
    ) -> Optional[Reaction]:
        """Find a user's reaction on a target."""
        stmt = select(reactions_table).where(
            reactions_table.c.user_id == user_id,
            reactions_table.c.target_type == target_type.value,
            reactions_table.c.target_id == target_id,
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_reaction(row._asdict()) if row else None

    async def save(self, reaction: Reaction) -> Reaction:
        """Save a reaction (create or change type).

        The unique (user, target) constraint rejects a second reaction with
        IntegrityError; the insert runs in a savepoint so the request
        transaction stays usable.
        """
        stmt = select(reactions_table.c.id).where(reactions_table.c.id == reaction.id)
        exists = (await self.session.execute(stmt)).fetchone() is not None

        if exists:
            await self.session.execute(
                update(reactions_table)
                .where(reactions_table.c.id == reaction.id)
                .values(type=reaction.type.value)
            )
        else:
            async with self.session.begin_nested():
                await self.session.execute(
                    reactions_table.insert().values(**reaction_to_dict(reaction))
                )

        await self.session.flush()
        return reaction

    async def delete(self, reaction_id: ReactionId) -> None:
        """Delete a reaction."""
        stmt = delete(reactions_table).where(reactions_table.c.id == reaction_id)
        await self.session.execute(stmt)
        await self.session.flush()

    async def delete_for_targets(
        self, target_type: TargetType, target_ids: Sequence[UUID]
    ) -> int:
        """Delete every reaction on the given targets."""
        if not target_ids:
            return 0
        stmt = delete(reactions_table).where(
            reactions_table.c.target_type == target_type.value,
            reactions_table.c.target_id.in_(list(target_ids)),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
