"""Tenant resolution domain service."""

import logfire

from huddle.domain.error import NotAuthorizedError, NotFoundError, TenantNotFoundError
from huddle.domain.model.company import Company
from huddle.domain.model.user import User
from huddle.domain.repository import CompanyRepository, UserRepository
from huddle.domain.value import UserId, UserRole
from huddle.domain.value.types import TenantSlug

from .base import Service


class CompanyService(Service):
    """Resolves tenant slugs and tenant members."""

    def __init__(
        self, company_repository: CompanyRepository, user_repository: UserRepository
    ) -> None:
        """Initialize company service.

        Args:
            company_repository: Company repository
            user_repository: User repository
        """
        self.company_repository = company_repository
        self.user_repository = user_repository

    async def resolve_tenant(self, slug: str) -> Company:
        """Find the active company behind a slug.

        Args:
            slug: Tenant slug from the URL

        Returns:
            The company

        Raises:
            TenantNotFoundError: If the slug is malformed, unknown or inactive
        """
        try:
            tenant_slug = TenantSlug(slug)
        except ValueError:
            raise TenantNotFoundError(slug)

        company = await self.company_repository.find_by_slug(tenant_slug)
        if company is None or not company.is_active:
            logfire.warn("Unknown tenant", slug=slug)
            raise TenantNotFoundError(slug)
        return company

    async def resolve_member(self, company: Company, user_id: UserId) -> User:
        """Find a member of the company.

        Args:
            company: Tenant
            user_id: Requesting user

        Returns:
            The member

        Raises:
            NotFoundError: If the user does not exist
            NotAuthorizedError: If the user belongs to another tenant
        """
        user = await self.user_repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", str(user_id))
        if user.company_id != company.id:
            logfire.warn(
                "Cross-tenant access attempt",
                user_id=str(user_id),
                company_id=str(company.id),
            )
            raise NotAuthorizedError("access", f"company {company.slug}", str(user_id))
        return user

    async def resolve_admin(self, company: Company, user_id: UserId) -> User:
        """Find an org admin of the company.

        Raises:
            NotAuthorizedError: If the member is not an org admin
        """
        user = await self.resolve_member(company, user_id)
        if user.role != UserRole.ORG_ADMIN:
            raise NotAuthorizedError("administer", f"company {company.slug}", str(user_id))
        return user
