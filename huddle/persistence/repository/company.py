"""PostgreSQL implementation of Company repository."""

from typing import List, Optional

import logfire
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.domain.model import Company
from huddle.domain.repository import CompanyRepository
from huddle.domain.value import CompanyId
from huddle.domain.value.types import TenantSlug
from huddle.persistence.mappers import company_to_dict, row_to_company
from huddle.persistence.tables import companies_table


class PostgresCompanyRepository(CompanyRepository):
    """PostgreSQL implementation of CompanyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, company_id: CompanyId) -> Optional[Company]:
        """Find a company by ID."""
        stmt = select(companies_table).where(companies_table.c.id == company_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_company(row._asdict()) if row else None

    async def find_by_slug(self, slug: TenantSlug) -> Optional[Company]:
        """Find a company by its URL slug."""
        with logfire.span("company_repository.find_by_slug", slug=slug.root):
            stmt = select(companies_table).where(companies_table.c.slug == slug.root)
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Company not found", slug=slug.root)
                return None
            return row_to_company(row._asdict())

    async def find_active(self) -> List[Company]:
        """List all active companies."""
        stmt = (
            select(companies_table)
            .where(companies_table.c.is_active.is_(True))
            .order_by(companies_table.c.slug)
        )
        result = await self.session.execute(stmt)
        return [row_to_company(row._asdict()) for row in result.fetchall()]

    async def save(self, company: Company) -> Company:
        """Save a company (create or update)."""
        existing = await self.find_by_id(company.id)
        company_dict = company_to_dict(company)

        if existing:
            stmt = (
                companies_table.update()
                .where(companies_table.c.id == company.id)
                .values(**company_dict)
            )
        else:
            stmt = companies_table.insert().values(**company_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return company
