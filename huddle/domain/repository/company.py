"""Company repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from huddle.domain.model.company import Company
from huddle.domain.value import CompanyId
from huddle.domain.value.types import TenantSlug


class CompanyRepository(ABC):
    """Repository for the Company (tenant) aggregate."""

    @abstractmethod
    async def find_by_id(self, company_id: CompanyId) -> Optional[Company]:
        """Find a company by ID.

        Args:
            company_id: The company's unique identifier

        Returns:
            The company if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_slug(self, slug: TenantSlug) -> Optional[Company]:
        """Find a company by its URL slug.

        Args:
            slug: Tenant slug

        Returns:
            The company if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_active(self) -> List[Company]:
        """List all active companies.

        Returns:
            Active companies
        """
        pass

    @abstractmethod
    async def save(self, company: Company) -> Company:
        """Save a company (create or update).

        Args:
            company: The company to save

        Returns:
            The saved company
        """
        pass
