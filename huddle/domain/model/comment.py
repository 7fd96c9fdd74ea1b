"""Comment entity.

Comments are two levels deep: top-level comments (level 0) on a post and
replies (level 1) to a top-level comment.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from huddle.domain.model.common import DomainModel, utcnow
from huddle.domain.value import CommentId, CommentStatus, CompanyId, PostId, UserId

DELETED_PLACEHOLDER = "(deleted)"


class Comment(DomainModel):
    """Comment or reply on a post."""

    id: CommentId
    company_id: CompanyId
    post_id: PostId
    author_id: UserId
    content: str = Field(min_length=1, max_length=10000)
    parent_comment_id: Optional[CommentId] = None
    level: int = Field(default=0, ge=0, le=1)
    status: CommentStatus = CommentStatus.VISIBLE
    replies_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None

    @property
    def is_deleted(self) -> bool:
        return self.status == CommentStatus.DELETED
