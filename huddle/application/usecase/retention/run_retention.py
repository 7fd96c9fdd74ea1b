"""Retention sweep use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from huddle.application.usecase.base import BaseUseCase, best_effort
from huddle.domain.service import (
    CompanyService,
    MicrocacheService,
    RetentionReport,
    RetentionService,
)
from huddle.domain.value import UserId


class RunRetentionRequest(BaseModel):
    """Retention sweep request."""

    org: str
    user_id: UUID  # Requesting admin


class RunRetentionUseCase(BaseUseCase):
    """Use case for sweeping one tenant's expired soft-deleted content."""

    def __init__(
        self,
        company_service: CompanyService,
        retention_service: RetentionService,
        microcache: MicrocacheService,
    ) -> None:
        """Initialize retention use case.

        Args:
            company_service: Tenant and admin resolution
            retention_service: Retention sweep
            microcache: Cache to invalidate
        """
        self.company_service = company_service
        self.retention_service = retention_service
        self.microcache = microcache

    async def execute(self, request: RunRetentionRequest) -> RetentionReport:
        """Execute retention sweep flow.

        Raises:
            NotAuthorizedError: If the requester is not an org admin
        """
        company = await self.company_service.resolve_tenant(request.org)
        await self.company_service.resolve_admin(company, UserId(request.user_id))

        with logfire.span("run_retention.execute", org=request.org):
            report = await self.retention_service.purge_for_company(company)
            if report.posts:
                await best_effort(
                    self.microcache.bust_tenant(company.slug.root),
                    "bust_tenant",
                    slug=company.slug.root,
                )
            return report
