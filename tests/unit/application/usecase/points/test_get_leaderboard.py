"""Unit tests for the admin use cases."""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from huddle.application.usecase.perf.get_perf_summary import (
    GetPerfSummaryRequest,
    GetPerfSummaryUseCase,
)
from huddle.application.usecase.points.get_leaderboard import (
    GetLeaderboardRequest,
    GetLeaderboardUseCase,
)
from huddle.config import PerfSettings
from huddle.domain.error import NotAuthorizedError
from huddle.domain.model.common import utcnow
from huddle.domain.model.perf import PerfSample
from huddle.domain.repository import CompanyRepository, UserRepository
from huddle.domain.service import CompanyService, PerfRecorder, PointsService
from huddle.domain.value import PointAction, TargetType, UserRole
from tests.conftest import make_company, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


async def seed(unit_env):
    company_repo = await unit_env.get(CompanyRepository)
    user_repo = await unit_env.get(UserRepository)
    company = await company_repo.save(make_company())
    admin = await user_repo.save(make_user(company, "Ada Admin", role=UserRole.ORG_ADMIN))
    member = await user_repo.save(make_user(company, "Grace Hopper"))
    return company, admin, member


class TestGetLeaderboardUseCase:
    """Tests for GetLeaderboardUseCase."""

    @pytest.mark.asyncio
    async def test_default_window_and_rows(self, unit_env):
        """Without bounds the last 30 days are summarized."""
        # Arrange
        points_service = await unit_env.get(PointsService)
        use_case = GetLeaderboardUseCase(
            company_service=await unit_env.get(CompanyService),
            points_service=points_service,
        )
        company, admin, member = await seed(unit_env)
        await points_service.award(
            company, member.id, PointAction.POST_CREATED, TargetType.POST, uuid4()
        )

        # Act
        response = await use_case.execute(
            GetLeaderboardRequest(org="acme", user_id=admin.id)
        )

        # Assert
        assert response.to_date == utcnow().date()
        assert response.from_date == response.to_date - timedelta(days=30)
        assert [(r.name, r.points) for r in response.rows] == [("Grace Hopper", 5)]

    @pytest.mark.asyncio
    async def test_reversed_bounds_are_swapped(self, unit_env):
        use_case = GetLeaderboardUseCase(
            company_service=await unit_env.get(CompanyService),
            points_service=await unit_env.get(PointsService),
        )
        _, admin, _ = await seed(unit_env)

        response = await use_case.execute(
            GetLeaderboardRequest(
                org="acme",
                user_id=admin.id,
                from_date=date(2024, 3, 31),
                to_date=date(2024, 3, 1),
            )
        )

        assert response.from_date == date(2024, 3, 1)
        assert response.to_date == date(2024, 3, 31)
        assert response.rows == []

    @pytest.mark.asyncio
    async def test_members_cannot_read_leaderboard(self, unit_env):
        use_case = GetLeaderboardUseCase(
            company_service=await unit_env.get(CompanyService),
            points_service=await unit_env.get(PointsService),
        )
        _, _, member = await seed(unit_env)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(GetLeaderboardRequest(org="acme", user_id=member.id))


class TestGetPerfSummaryUseCase:
    """Tests for GetPerfSummaryUseCase."""

    @pytest.mark.asyncio
    async def test_summary_is_scoped_to_tenant(self, unit_env):
        """Samples of other tenants do not leak into the summary."""
        # Arrange
        perf_recorder = await unit_env.get(PerfRecorder)
        use_case = GetPerfSummaryUseCase(
            company_service=await unit_env.get(CompanyService),
            perf_recorder=perf_recorder,
            perf_settings=PerfSettings(),
        )
        company, admin, _ = await seed(unit_env)
        perf_recorder.record(
            PerfSample(route="GET /{org}/feed", duration_ms=120, company_id=company.id)
        )
        perf_recorder.record(
            PerfSample(route="GET /{org}/feed", duration_ms=900, company_id=uuid4())
        )

        # Act
        response = await use_case.execute(
            GetPerfSummaryRequest(org="acme", user_id=admin.id, series_minutes=5)
        )

        # Assert
        assert response.aggregate.avg_ms == 120
        assert len(response.series) == 5
        assert response.slow == []
