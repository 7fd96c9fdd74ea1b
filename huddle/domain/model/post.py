"""Post aggregate root.

A post belongs to exactly one tenant, optionally one group, and is authored
by one member. It shows up in feeds only while it is published and not
soft-deleted; soft-deleted posts linger until the retention sweep removes
them.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from huddle.domain.model.common import DomainModel, utcnow
from huddle.domain.value import (
    CompanyId,
    GroupId,
    PostId,
    PostStatus,
    PostType,
    ReactionType,
    UserId,
)
from huddle.domain.value.common import ValueObject


class PollOption(ValueObject):
    """A selectable answer with its running vote count."""

    id: UUID
    label: str = Field(min_length=1, max_length=200)
    votes_count: int = Field(default=0, ge=0)


class PollQuestion(ValueObject):
    """A poll question and its options."""

    id: UUID
    text: str = Field(min_length=1, max_length=500)
    options: list[PollOption] = Field(min_length=2)
    multi_select: bool = False

    def option_ids(self) -> set[UUID]:
        return {option.id for option in self.options}


class Poll(ValueObject):
    """Poll sub-document embedded in POLL posts."""

    title: Optional[str] = None
    questions: list[PollQuestion] = Field(default_factory=list)
    total_participants: int = Field(default=0, ge=0)
    voter_ids: list[UserId] = Field(default_factory=list)
    is_closed: bool = False
    closes_at: Optional[datetime] = None

    def has_voted(self, user_id: UserId) -> bool:
        return user_id in self.voter_ids


def _empty_reaction_counts() -> dict[ReactionType, int]:
    return {reaction_type: 0 for reaction_type in ReactionType}


class Post(DomainModel):
    """Post aggregate root."""

    id: PostId
    company_id: CompanyId
    group_id: Optional[GroupId] = None
    author_id: UserId
    type: PostType = PostType.TEXT
    status: PostStatus = PostStatus.PUBLISHED
    title: Optional[str] = Field(default=None, max_length=300)
    rich_text: str = Field(default="", max_length=20000)
    is_pinned: bool = False
    poll: Optional[Poll] = None

    # Denormalized counters (UI hints, eventually consistent)
    comments_count: int = Field(default=0, ge=0)
    reactions_count_by_type: dict[ReactionType, int] = Field(
        default_factory=_empty_reaction_counts
    )
    views_count: int = Field(default=0, ge=0)

    created_at: datetime = Field(default_factory=utcnow)
    published_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    deleted_by: Optional[UserId] = None

    @model_validator(mode="after")
    def validate_poll_content(self) -> "Post":
        """POLL posts carry a poll with at least one question."""
        if self.type == PostType.POLL and (
            self.poll is None or not self.poll.questions
        ):
            raise ValueError("Poll posts need at least one question")
        return self

    @property
    def is_visible(self) -> bool:
        """Visible in feeds: published and not soft-deleted."""
        return self.status == PostStatus.PUBLISHED and self.deleted_at is None

    @property
    def is_active_poll(self) -> bool:
        """An open poll, ranked above other unpinned posts."""
        return (
            self.type == PostType.POLL
            and self.poll is not None
            and not self.poll.is_closed
        )

    @property
    def reactions_total(self) -> int:
        return sum(self.reactions_count_by_type.values())
