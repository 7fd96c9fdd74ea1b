"""User repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from huddle.domain.model.user import User
from huddle.domain.value import CompanyId, UserId


class UserRepository(ABC):
    """Repository for tenant members."""

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        """Find several users at once.

        Args:
            user_ids: User IDs to look up

        Returns:
            Users that exist (order not guaranteed)
        """
        pass

    @abstractmethod
    async def find_ids_matching(self, company_id: CompanyId, text: str) -> List[UserId]:
        """Find users whose full name or title contains the text.

        The match is a case-insensitive literal substring match; the text is
        never interpreted as a pattern.

        Args:
            company_id: Tenant to search in
            text: Free text typed by the requester

        Returns:
            IDs of matching users (empty when none match)
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
