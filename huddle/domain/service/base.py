"""Base service class for domain services."""

from typing import Any, Optional

from huddle.domain.model.company import Company


class Service:
    """Base class for all domain services.

    Every entity a service loads belongs to exactly one tenant. An entity of
    another tenant is reported exactly like a missing one, so IDs never leak
    across tenants.
    """

    @staticmethod
    def in_tenant(entity: Optional[Any], company: Company) -> bool:
        """Whether ``entity`` exists and belongs to ``company``."""
        return entity is not None and entity.company_id == company.id
