"""Point ledger entities.

A PointEvent is an immutable ledger row. Its ``event_key`` identifies the
logical event: two award attempts with the same semantic meaning produce
the same key, and the database keeps only one row per key.
"""

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from huddle.domain.model.common import DomainModel, utcnow
from huddle.domain.value import (
    CommentId,
    CompanyId,
    PointAction,
    PointDirection,
    PointEventId,
    Polarity,
    PostId,
    ReactionType,
    TargetType,
    UserId,
)
from huddle.domain.value.common import ValueObject


class PointMeta(ValueObject):
    """Context attached to a point event."""

    reaction_type: Optional[ReactionType] = None
    direction: Optional[PointDirection] = None
    post_id: Optional[PostId] = None
    comment_id: Optional[CommentId] = None
    parent_comment_id: Optional[CommentId] = None


class EventKey(ValueObject):
    """Structured idempotency key of a point event.

    Serialized as a JSON array (so no field value can be mistaken for a
    separator) and digested to a fixed-length string for indexing.
    """

    action: PointAction
    company_id: CompanyId
    user_id: UserId
    target_type: TargetType
    target_id: UUID
    reaction_type: Optional[ReactionType] = None
    direction: Optional[PointDirection] = None
    post_id: Optional[PostId] = None
    comment_id: Optional[CommentId] = None
    parent_comment_id: Optional[CommentId] = None
    polarity: Polarity = Polarity.ADD

    def parts(self) -> list[Optional[str]]:
        """Ordered key components; absent components are null."""

        def _s(value: object) -> Optional[str]:
            if value is None:
                return None
            if isinstance(value, Enum):
                return value.value
            return str(value)

        return [
            _s(self.action),
            _s(self.company_id),
            _s(self.user_id),
            _s(self.target_type),
            _s(self.target_id),
            self.reaction_type.value.upper() if self.reaction_type else None,
            _s(self.direction),
            _s(self.post_id),
            _s(self.comment_id),
            _s(self.parent_comment_id),
            self.polarity.marker,
        ]

    def serialize(self) -> str:
        """Deterministic string form stored in the ledger."""
        canonical = json.dumps(self.parts(), separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class PointEvent(DomainModel):
    """Immutable ledger row."""

    id: PointEventId
    company_id: CompanyId
    user_id: UserId
    actor_user_id: Optional[UserId] = None
    action: PointAction
    points: int
    event_key: str = Field(min_length=1, max_length=128)
    target_type: TargetType
    target_id: UUID
    meta: PointMeta = PointMeta()
    created_at: datetime = Field(default_factory=utcnow)


class LeaderboardRow(DomainModel):
    """Per-user aggregate over a date range of the ledger."""

    user_id: UserId
    name: str = "Unknown"
    points: int = 0
    events: int = 0
    posts: int = 0
    comments: int = 0
    replies: int = 0
    reactions: int = 0
    likes: int = 0
