"""In-memory company repository for testing."""

from typing import List, Optional

from huddle.domain.model.company import Company
from huddle.domain.repository.company import CompanyRepository
from huddle.domain.value import CompanyId
from huddle.domain.value.types import TenantSlug


class InMemoryCompanyRepository(CompanyRepository):
    """In-memory implementation of CompanyRepository for testing."""

    def __init__(self) -> None:
        self._companies: dict[CompanyId, Company] = {}

    async def find_by_id(self, company_id: CompanyId) -> Optional[Company]:
        """Find a company by ID."""
        return self._companies.get(company_id)

    async def find_by_slug(self, slug: TenantSlug) -> Optional[Company]:
        """Find a company by its URL slug."""
        for company in self._companies.values():
            if company.slug == slug:
                return company
        return None

    async def find_active(self) -> List[Company]:
        """List all active companies."""
        return sorted(
            (c for c in self._companies.values() if c.is_active),
            key=lambda c: c.slug.root,
        )

    async def save(self, company: Company) -> Company:
        """Save or update a company."""
        self._companies[company.id] = company
        return company
