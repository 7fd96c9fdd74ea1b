"""Reaction entity."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from huddle.domain.model.common import DomainModel, utcnow
from huddle.domain.value import CompanyId, ReactionId, ReactionType, TargetType, UserId


class Reaction(DomainModel):
    """A member's single reaction on a post or comment.

    At most one reaction exists per (user, target); changing the type
    replaces it.
    """

    id: ReactionId
    company_id: CompanyId
    user_id: UserId
    target_type: TargetType
    target_id: UUID
    type: ReactionType
    created_at: datetime = Field(default_factory=utcnow)
