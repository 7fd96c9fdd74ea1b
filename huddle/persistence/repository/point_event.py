"""PostgreSQL implementation of the points ledger repository."""

from datetime import datetime
from typing import Any, List, Optional

import logfire
from sqlalchemy import and_, case, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.domain.model import LeaderboardRow, PointEvent
from huddle.domain.repository import PointEventRepository
from huddle.domain.value import CompanyId, PointAction, ReactionType, UserId
from huddle.persistence.mappers import point_event_to_dict, row_to_point_event
from huddle.persistence.tables import point_events_table


def _count_of(*actions: PointAction) -> Any:
    """SUM(1) over rows with one of the actions."""
    return func.sum(
        case((point_events_table.c.action.in_([a.value for a in actions]), 1), else_=0)
    )


class PostgresPointEventRepository(PointEventRepository):
    """PostgreSQL implementation of PointEventRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def add(self, event: PointEvent) -> PointEvent:
        """Append a ledger row.

        The insert runs in a savepoint: a duplicate key raises IntegrityError
        without aborting the surrounding request transaction.
        """
        with logfire.span(
            "point_event_repository.add",
            user_id=str(event.user_id),
            action=event.action.value,
        ):
            stmt = point_events_table.insert().values(**point_event_to_dict(event))
            async with self.session.begin_nested():
                await self.session.execute(stmt)
            return event

    async def find_by_user(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[PointEvent]:
        """List a user's ledger rows, oldest first."""
        stmt = (
            select(point_events_table)
            .where(
                point_events_table.c.company_id == company_id,
                point_events_table.c.user_id == user_id,
            )
            .order_by(point_events_table.c.created_at, point_events_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_point_event(row._asdict()) for row in result.fetchall()]

    async def total_for_user(self, company_id: CompanyId, user_id: UserId) -> int:
        """Sum a user's points."""
        stmt = select(func.coalesce(func.sum(point_events_table.c.points), 0)).where(
            point_events_table.c.company_id == company_id,
            point_events_table.c.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def summarize(
        self,
        company_id: CompanyId,
        created_from: datetime,
        created_to: datetime,
        user_id: Optional[UserId] = None,
        limit: int = 200,
    ) -> List[LeaderboardRow]:
        """Aggregate ledger rows per user over an inclusive time range."""
        with logfire.span(
            "point_event_repository.summarize",
            company_id=str(company_id),
            user_id=str(user_id) if user_id else None,
        ):
            events = point_events_table.c
            given = case(
                (events.action == PointAction.REACTION_GIVEN_ADD.value, 1),
                (events.action == PointAction.REACTION_GIVEN_REMOVE.value, -1),
                else_=0,
            )
            is_like = events.meta["reaction_type"].astext == ReactionType.LIKE.value
            likes = case(
                (
                    and_(is_like, events.action == PointAction.REACTION_GIVEN_ADD.value),
                    1,
                ),
                (
                    and_(
                        is_like, events.action == PointAction.REACTION_GIVEN_REMOVE.value
                    ),
                    -1,
                ),
                else_=0,
            )
            points = func.sum(events.points).label("points")

            stmt = (
                select(
                    events.user_id,
                    points,
                    func.count().label("events"),
                    _count_of(PointAction.POST_CREATED).label("posts"),
                    _count_of(PointAction.COMMENT_CREATED).label("comments"),
                    _count_of(PointAction.REPLY_CREATED).label("replies"),
                    func.sum(given).label("reactions"),
                    func.sum(likes).label("likes"),
                )
                .where(
                    events.company_id == company_id,
                    events.created_at >= created_from,
                    events.created_at <= created_to,
                )
                .group_by(events.user_id)
                .order_by(desc(points), events.user_id)
                .limit(limit)
            )
            if user_id is not None:
                stmt = stmt.where(events.user_id == user_id)

            result = await self.session.execute(stmt)
            rows = [
                LeaderboardRow(
                    user_id=UserId(row.user_id),
                    points=int(row.points or 0),
                    events=int(row.events or 0),
                    posts=int(row.posts or 0),
                    comments=int(row.comments or 0),
                    replies=int(row.replies or 0),
                    reactions=int(row.reactions or 0),
                    likes=int(row.likes or 0),
                )
                for row in result.fetchall()
            ]
            logfire.info("Leaderboard rows", count=len(rows))
            return rows
