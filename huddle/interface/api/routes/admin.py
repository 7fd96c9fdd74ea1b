"""Tenant admin routes: points leaderboard, perf and retention."""

from datetime import date
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query

from huddle.application.usecase.perf import (
    GetPerfSummaryRequest,
    GetPerfSummaryResponse,
    GetPerfSummaryUseCase,
)
from huddle.application.usecase.points import (
    GetLeaderboardRequest,
    GetLeaderboardResponse,
    GetLeaderboardUseCase,
)
from huddle.application.usecase.retention import (
    RunRetentionRequest,
    RunRetentionUseCase,
)
from huddle.domain.error import DomainError
from huddle.domain.service import RetentionReport
from huddle.interface.api.errors import http_error, require_user

router = APIRouter(prefix="/{org}/admin", tags=["admin"], route_class=DishkaRoute)


@router.get("/points", response_model=GetLeaderboardResponse)
async def leaderboard(
    org: str,
    get_leaderboard_use_case: FromDishka[GetLeaderboardUseCase],
    x_user_id: UUID | None = Header(default=None),
    from_date: date | None = Query(default=None, alias="from"),
    to_date: date | None = Query(default=None, alias="to"),
    member_id: UUID | None = None,
) -> GetLeaderboardResponse:
    """Points leaderboard for a date range (last 30 days by default)."""
    user_id = require_user(x_user_id)
    try:
        return await get_leaderboard_use_case.execute(
            GetLeaderboardRequest(
                org=org,
                user_id=user_id,
                from_date=from_date,
                to_date=to_date,
                member_id=member_id,
            )
        )
    except DomainError as e:
        raise http_error(e, "leaderboard")


@router.get("/perf", response_model=GetPerfSummaryResponse)
async def perf_summary(
    org: str,
    get_perf_summary_use_case: FromDishka[GetPerfSummaryUseCase],
    x_user_id: UUID | None = Header(default=None),
    minutes: int = Query(default=60, ge=1, le=24 * 60),
    series_minutes: int = Query(default=15, ge=1, le=180),
) -> GetPerfSummaryResponse:
    """Request timings, per-minute series, slow requests and cache ratios."""
    user_id = require_user(x_user_id)
    try:
        return await get_perf_summary_use_case.execute(
            GetPerfSummaryRequest(
                org=org,
                user_id=user_id,
                minutes=minutes,
                series_minutes=series_minutes,
            )
        )
    except DomainError as e:
        raise http_error(e, "perf_summary")


@router.post("/retention", response_model=RetentionReport)
async def run_retention(
    org: str,
    run_retention_use_case: FromDishka[RunRetentionUseCase],
    x_user_id: UUID | None = Header(default=None),
) -> RetentionReport:
    """Hard-delete this tenant's soft-deleted content past its retention window."""
    user_id = require_user(x_user_id)
    try:
        return await run_retention_use_case.execute(
            RunRetentionRequest(org=org, user_id=user_id)
        )
    except DomainError as e:
        raise http_error(e, "run_retention")
