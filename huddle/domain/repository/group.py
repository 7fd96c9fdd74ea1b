"""Group repository interface."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from huddle.domain.model.feed import GroupStub
from huddle.domain.model.group import Group
from huddle.domain.value import CompanyId, GroupId, UserId


class GroupRepository(ABC):
    """Repository for tenant groups."""

    @abstractmethod
    async def find_by_id(self, group_id: GroupId) -> Optional[Group]:
        """Find a group by ID.

        Args:
            group_id: The group's unique identifier

        Returns:
            The group if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_ids_for_member(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[GroupId]:
        """Find the groups a user owns, moderates or belongs to.

        Args:
            company_id: Tenant to search in
            user_id: The member

        Returns:
            Group IDs (empty when the user is in no group)
        """
        pass

    @abstractmethod
    async def find_stubs(
        self, company_id: CompanyId, group_ids: Sequence[GroupId]
    ) -> Dict[GroupId, GroupStub]:
        """Fetch id/name stubs for several groups in one query.

        Args:
            company_id: Tenant the groups belong to
            group_ids: Groups to look up

        Returns:
            Mapping of group ID to stub for groups that exist
        """
        pass

    @abstractmethod
    async def save(self, group: Group) -> Group:
        """Save a group (create or update).

        Args:
            group: The group to save

        Returns:
            The saved group
        """
        pass
