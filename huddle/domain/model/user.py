"""User entity."""

from typing import Optional

from pydantic import Field

from huddle.domain.model.common import DomainModel
from huddle.domain.value import CompanyId, UserId, UserRole


class User(DomainModel):
    """A member of one tenant.

    Name and title are matched by the feed's people filter.
    """

    id: UserId
    company_id: CompanyId
    full_name: str = Field(min_length=1, max_length=200)
    title: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = None
    role: UserRole = UserRole.MEMBER
