"""Leaderboard use case."""

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase
from huddle.domain.model.common import utcnow
from huddle.domain.model.point_event import LeaderboardRow
from huddle.domain.service import CompanyService, PointsService
from huddle.domain.value import UserId

DEFAULT_WINDOW_DAYS = 30


class GetLeaderboardRequest(BaseModel):
    """Leaderboard request.

    Missing bounds default to the last 30 days; reversed bounds are swapped.
    """

    org: str
    user_id: UUID  # Requesting admin
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    member_id: Optional[UUID] = None  # Restrict to one member


class GetLeaderboardResponse(BaseModel):
    """Leaderboard response."""

    from_date: date
    to_date: date
    rows: list[LeaderboardRow]


class GetLeaderboardUseCase(BaseUseCase):
    """Use case for the admin points leaderboard."""

    def __init__(
        self, company_service: CompanyService, points_service: PointsService
    ) -> None:
        """Initialize leaderboard use case.

        Args:
            company_service: Tenant and admin resolution
            points_service: Points ledger
        """
        self.company_service = company_service
        self.points_service = points_service

    async def execute(self, request: GetLeaderboardRequest) -> GetLeaderboardResponse:
        """Execute leaderboard flow.

        Raises:
            NotAuthorizedError: If the requester is not an org admin
        """
        company = await self.company_service.resolve_tenant(request.org)
        await self.company_service.resolve_admin(company, UserId(request.user_id))

        to_date = request.to_date or utcnow().date()
        from_date = request.from_date or to_date - timedelta(days=DEFAULT_WINDOW_DAYS)
        if from_date > to_date:
            from_date, to_date = to_date, from_date

        with logfire.span(
            "get_leaderboard.execute",
            org=request.org,
            from_date=from_date.isoformat(),
            to_date=to_date.isoformat(),
        ):
            rows = await self.points_service.leaderboard(
                company.id,
                from_date,
                to_date,
                user_id=UserId(request.member_id) if request.member_id else None,
            )
            return GetLeaderboardResponse(from_date=from_date, to_date=to_date, rows=rows)
