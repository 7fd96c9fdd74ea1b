"""Domain value objects for Huddle.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum, IntEnum
from typing import Optional

from pydantic import field_validator

from huddle.domain.value.common import RootValueObject


class LenientEnum(str, Enum):
    """String enum that accepts its values case-insensitively."""

    @classmethod
    def _missing_(cls, value: object) -> Optional["LenientEnum"]:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @classmethod
    def parse(cls, value: object) -> Optional["LenientEnum"]:
        """Parse a raw value, returning None instead of raising.

        Args:
            value: Raw input (any type)

        Returns:
            Matching member or None
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class PostType(LenientEnum):
    """Kind of post content."""

    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    POLL = "poll"
    ANNOUNCEMENT = "announcement"


class PostStatus(LenientEnum):
    """Post lifecycle status. Only PUBLISHED posts appear in feeds."""

    DRAFT = "draft"
    QUEUED = "queued"
    APPROVED = "approved"
    PUBLISHED = "published"
    REJECTED = "rejected"


class CommentStatus(LenientEnum):
    """Comment lifecycle status."""

    VISIBLE = "visible"
    DELETED = "deleted"


class PostingMode(LenientEnum):
    """Tenant posting policy."""

    OPEN = "open"  # Posts publish immediately
    MODERATED = "moderated"  # Posts wait in the moderation queue


class UserRole(LenientEnum):
    """Role of a member within a tenant."""

    ORG_ADMIN = "org_admin"
    MODERATOR = "moderator"
    MEMBER = "member"

    @property
    def can_moderate(self) -> bool:
        """Whether this role may approve, reject, pin and delete others' posts."""
        return self in (UserRole.ORG_ADMIN, UserRole.MODERATOR)


class ReactionType(LenientEnum):
    """Reaction kinds a member can leave on a post or comment."""

    LIKE = "like"
    HEART = "heart"
    CELEBRATE = "celebrate"
    SUPPORT = "support"
    LAUGH = "laugh"
    INSIGHTFUL = "insightful"
    THANKS = "thanks"


class TargetType(LenientEnum):
    """Entity a reaction, attachment or point event points at."""

    POST = "post"
    COMMENT = "comment"


class FeedScope(LenientEnum):
    """Whether a feed covers the whole tenant or a single group."""

    COMPANY = "company"
    GROUP = "group"


class FeedTab(LenientEnum):
    """Feed tab, used only when no explicit post type is requested."""

    ANNOUNCEMENTS = "announcements"
    REGULAR = "regular"


class PointAction(LenientEnum):
    """Scorable member actions."""

    POST_CREATED = "post_created"
    COMMENT_CREATED = "comment_created"
    REPLY_CREATED = "reply_created"
    COMMENT_RECEIVED = "comment_received"
    REPLY_RECEIVED = "reply_received"
    REACTION_GIVEN_ADD = "reaction_given_add"
    REACTION_GIVEN_REMOVE = "reaction_given_remove"
    REACTION_RECEIVED_ADD = "reaction_received_add"
    REACTION_RECEIVED_REMOVE = "reaction_received_remove"

    @property
    def is_reaction_given(self) -> bool:
        return self in (
            PointAction.REACTION_GIVEN_ADD,
            PointAction.REACTION_GIVEN_REMOVE,
        )

    @property
    def is_reaction_received(self) -> bool:
        return self in (
            PointAction.REACTION_RECEIVED_ADD,
            PointAction.REACTION_RECEIVED_REMOVE,
        )


class PointDirection(LenientEnum):
    """Side of a reaction a point event is credited to."""

    GIVEN = "given"
    RECEIVED = "received"


class Polarity(IntEnum):
    """Sign applied to a rule value: grants add, reversals remove."""

    ADD = 1
    REMOVE = -1

    @property
    def marker(self) -> str:
        return "ADD" if self is Polarity.ADD else "REMOVE"


class TenantSlug(RootValueObject[str]):
    """URL-safe tenant identifier.

    Lowercase alphanumeric with hyphens, 1-64 characters.
    Examples: 'acme', 'globex-eu'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        v = v.strip().lower()
        if not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", v):
            raise ValueError(
                "Tenant slug must be lowercase alphanumeric with single hyphens"
            )
        if len(v) > 64:
            raise ValueError("Tenant slug must be 1-64 characters")
        return v
