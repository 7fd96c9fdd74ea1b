"""In-memory points ledger repository for testing."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from huddle.domain.model.point_event import LeaderboardRow, PointEvent
from huddle.domain.repository.point_event import PointEventRepository
from huddle.domain.value import CompanyId, PointAction, ReactionType, UserId


class InMemoryPointEventRepository(PointEventRepository):
    """In-memory implementation of PointEventRepository for testing.

    Enforces the same uniqueness as the database: one row per
    (company, event key).
    """

    def __init__(self) -> None:
        self._events: list[PointEvent] = []

    @property
    def events(self) -> list[PointEvent]:
        return list(self._events)

    async def add(self, event: PointEvent) -> PointEvent:
        """Append a ledger row."""
        for existing in self._events:
            if (
                existing.company_id == event.company_id
                and existing.event_key == event.event_key
            ):
                raise IntegrityError("Duplicate point event", None, Exception())
        self._events.append(event)
        return event

    async def find_by_user(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[PointEvent]:
        """List a user's ledger rows, oldest first."""
        rows = [
            e for e in self._events if e.company_id == company_id and e.user_id == user_id
        ]
        return sorted(rows, key=lambda e: e.created_at)

    async def total_for_user(self, company_id: CompanyId, user_id: UserId) -> int:
        """Sum a user's points."""
        return sum(e.points for e in await self.find_by_user(company_id, user_id))

    async def summarize(
        self,
        company_id: CompanyId,
        created_from: datetime,
        created_to: datetime,
        user_id: Optional[UserId] = None,
        limit: int = 200,
    ) -> List[LeaderboardRow]:
        """Aggregate ledger rows per user over an inclusive time range."""
        totals: dict[UserId, dict[str, int]] = {}
        for event in self._events:
            if event.company_id != company_id:
                continue
            if not created_from <= event.created_at <= created_to:
                continue
            if user_id is not None and event.user_id != user_id:
                continue

            row = totals.setdefault(
                event.user_id,
                dict.fromkeys(
                    ("points", "events", "posts", "comments", "replies", "reactions", "likes"),
                    0,
                ),
            )
            row["points"] += event.points
            row["events"] += 1
            if event.action == PointAction.POST_CREATED:
                row["posts"] += 1
            elif event.action == PointAction.COMMENT_CREATED:
                row["comments"] += 1
            elif event.action == PointAction.REPLY_CREATED:
                row["replies"] += 1
            elif event.action.is_reaction_given:
                step = 1 if event.action == PointAction.REACTION_GIVEN_ADD else -1
                row["reactions"] += step
                if event.meta.reaction_type == ReactionType.LIKE:
                    row["likes"] += step

        rows = [LeaderboardRow(user_id=uid, **values) for uid, values in totals.items()]
        rows.sort(key=lambda r: (-r.points, str(r.user_id)))
        return rows[:limit]
