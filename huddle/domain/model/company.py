"""Company (tenant) aggregate and its policies.

Every piece of content belongs to exactly one company. The policies and the
gamification rules are read-only configuration for the core: they are
edited elsewhere and only consulted here.
"""

from typing import Optional

from pydantic import Field

from huddle.domain.model.common import DomainModel
from huddle.domain.value import CompanyId, PointAction, PostingMode, ReactionType
from huddle.domain.value.common import ValueObject
from huddle.domain.value.types import TenantSlug


def _one_point_per_reaction() -> dict[ReactionType, int]:
    return {reaction_type: 1 for reaction_type in ReactionType}


class GamificationRules(ValueObject):
    """Point values per scorable action.

    Reaction actions look up a per-reaction-type map. When no
    ``reactions_received`` map is configured (the key is absent or null), the
    ``reactions_given`` map is used for both sides.
    """

    post_created: int = 5
    comment_created: int = 2
    reply_created: int = 1
    comment_received: int = 1
    reply_received: int = 1
    reactions_given: dict[ReactionType, int] = Field(
        default_factory=_one_point_per_reaction
    )
    reactions_received: Optional[dict[ReactionType, int]] = None

    def points_for(
        self, action: PointAction, reaction_type: Optional[ReactionType] = None
    ) -> int:
        """Base (unsigned) point value for an action.

        Unknown actions, missing reaction types and unconfigured entries are
        worth zero points; this lookup never raises.

        Args:
            action: Scorable action
            reaction_type: Reaction type for reaction actions

        Returns:
            Configured point value, 0 when unconfigured
        """
        if action.is_reaction_given:
            if reaction_type is None:
                return 0
            return self.reactions_given.get(reaction_type, 0)

        if action.is_reaction_received:
            if reaction_type is None:
                return 0
            received = (
                self.reactions_received
                if self.reactions_received is not None
                else self.reactions_given
            )
            return received.get(reaction_type, 0)

        flat = {
            PointAction.POST_CREATED: self.post_created,
            PointAction.COMMENT_CREATED: self.comment_created,
            PointAction.REPLY_CREATED: self.reply_created,
            PointAction.COMMENT_RECEIVED: self.comment_received,
            PointAction.REPLY_RECEIVED: self.reply_received,
        }
        return flat.get(action, 0)


class GamificationSettings(ValueObject):
    """Whether the tenant awards points, and how many.

    A tenant without stored rules earns nothing: ``{}`` and
    ``{"enabled": true}`` both leave ``rules`` unset.
    """

    enabled: bool = True
    rules: Optional[GamificationRules] = None

    @classmethod
    def with_default_rules(cls) -> "GamificationSettings":
        """Settings seeded with the stock point values for a new tenant."""
        return cls(enabled=True, rules=GamificationRules())

    @property
    def active_rules(self) -> Optional[GamificationRules]:
        """Rules to apply, or None when gamification is off or unconfigured."""
        if not self.enabled:
            return None
        return self.rules


class CompanyPolicies(ValueObject):
    """Tenant policies consulted by the core."""

    posting_mode: PostingMode = PostingMode.OPEN
    notifications_enabled: bool = True
    retention_days: int = Field(default=730, ge=1)


class Company(DomainModel):
    """Tenant aggregate root."""

    id: CompanyId
    slug: TenantSlug
    name: str = Field(min_length=1, max_length=200)
    is_active: bool = True
    policies: CompanyPolicies = CompanyPolicies()
    gamification: GamificationSettings = GamificationSettings()
