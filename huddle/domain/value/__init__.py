"""Domain value objects for Huddle."""

from huddle.domain.value.identifiers import (
    AttachmentId,
    CommentId,
    CompanyId,
    GroupId,
    PointEventId,
    PostId,
    ReactionId,
    UserId,
)
from huddle.domain.value.types import (
    CommentStatus,
    FeedScope,
    FeedTab,
    PointAction,
    PointDirection,
    Polarity,
    PostingMode,
    PostStatus,
    PostType,
    ReactionType,
    TargetType,
    TenantSlug,
    UserRole,
)

__all__ = [
    # Identifiers
    "CompanyId",
    "UserId",
    "GroupId",
    "PostId",
    "CommentId",
    "ReactionId",
    "AttachmentId",
    "PointEventId",
    # Types
    "PostType",
    "PostStatus",
    "CommentStatus",
    "PostingMode",
    "UserRole",
    "ReactionType",
    "TargetType",
    "FeedScope",
    "FeedTab",
    "PointAction",
    "PointDirection",
    "Polarity",
    "TenantSlug",
]
