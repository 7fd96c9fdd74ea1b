"""Group entity."""

from pydantic import Field

from huddle.domain.model.common import DomainModel
from huddle.domain.value import CompanyId, GroupId, UserId


class Group(DomainModel):
    """A sub-community inside a tenant with its own feed."""

    id: GroupId
    company_id: CompanyId
    name: str = Field(min_length=1, max_length=200)
    owner_ids: list[UserId] = Field(default_factory=list)
    moderator_ids: list[UserId] = Field(default_factory=list)
    member_ids: list[UserId] = Field(default_factory=list)

    def has_member(self, user_id: UserId) -> bool:
        """Whether the user is an owner, moderator or member of the group."""
        return (
            user_id in self.owner_ids
            or user_id in self.moderator_ids
            or user_id in self.member_ids
        )

    def can_moderate(self, user_id: UserId) -> bool:
        """Whether the user owns or moderates the group."""
        return user_id in self.owner_ids or user_id in self.moderator_ids
