"""Perf summary use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from huddle.application.usecase.base import BaseUseCase
from huddle.config import PerfSettings
from huddle.domain.model.perf import (
    CacheSummary,
    PerfAggregate,
    PerfSample,
    SeriesPoint,
)
from huddle.domain.service import CompanyService, PerfRecorder
from huddle.domain.value import UserId


class GetPerfSummaryRequest(BaseModel):
    """Perf summary request."""

    org: str
    user_id: UUID  # Requesting admin
    minutes: int = Field(default=60, ge=1, le=24 * 60)
    series_minutes: int = Field(default=15, ge=1, le=180)


class GetPerfSummaryResponse(BaseModel):
    """Perf summary for one tenant."""

    aggregate: PerfAggregate
    series: list[SeriesPoint]
    slow: list[PerfSample]
    cache: CacheSummary


class GetPerfSummaryUseCase(BaseUseCase):
    """Use case for the admin perf dashboard."""

    def __init__(
        self,
        company_service: CompanyService,
        perf_recorder: PerfRecorder,
        perf_settings: PerfSettings,
    ) -> None:
        """Initialize perf summary use case.

        Args:
            company_service: Tenant and admin resolution
            perf_recorder: In-process perf recorder
            perf_settings: Slow request threshold
        """
        self.company_service = company_service
        self.perf_recorder = perf_recorder
        self.perf_settings = perf_settings

    async def execute(self, request: GetPerfSummaryRequest) -> GetPerfSummaryResponse:
        """Execute perf summary flow.

        Raises:
            NotAuthorizedError: If the requester is not an org admin
        """
        company = await self.company_service.resolve_tenant(request.org)
        await self.company_service.resolve_admin(company, UserId(request.user_id))
        slug = company.slug.root

        return GetPerfSummaryResponse(
            aggregate=self.perf_recorder.aggregate(
                request.minutes, company_id=company.id, slug=slug
            ),
            series=self.perf_recorder.series(
                request.series_minutes, company_id=company.id, slug=slug
            ),
            slow=self.perf_recorder.recent_slow(
                threshold_ms=self.perf_settings.slow_threshold_ms,
                company_id=company.id,
            ),
            cache=self.perf_recorder.cache_summary(),
        )
