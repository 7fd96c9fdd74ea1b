"""In-memory group repository for testing."""

from typing import Dict, List, Optional, Sequence

from huddle.domain.model.feed import GroupStub
from huddle.domain.model.group import Group
from huddle.domain.repository.group import GroupRepository
from huddle.domain.value import CompanyId, GroupId, UserId


class InMemoryGroupRepository(GroupRepository):
    """In-memory implementation of GroupRepository for testing."""

    def __init__(self) -> None:
        self._groups: dict[GroupId, Group] = {}

    async def find_by_id(self, group_id: GroupId) -> Optional[Group]:
        """Find a group by ID."""
        return self._groups.get(group_id)

    async def find_ids_for_member(
        self, company_id: CompanyId, user_id: UserId
    ) -> List[GroupId]:
        """Find the groups a user owns, moderates or belongs to."""
        return [
            g.id
            for g in self._groups.values()
            if g.company_id == company_id and g.has_member(user_id)
        ]

    async def find_stubs(
        self, company_id: CompanyId, group_ids: Sequence[GroupId]
    ) -> Dict[GroupId, GroupStub]:
        """Fetch id/name stubs for several groups."""
        return {
            g.id: GroupStub(id=g.id, name=g.name)
            for g in self._groups.values()
            if g.company_id == company_id and g.id in group_ids
        }

    async def save(self, group: Group) -> Group:
        """Save or update a group."""
        self._groups[group.id] = group
        return group
