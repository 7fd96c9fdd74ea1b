"""Post response models shared by post, poll and feed use cases."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from huddle.domain.model.post import Poll, Post
from huddle.domain.value import PostStatus, PostType


class PostView(BaseModel):
    """Post as returned by the API."""

    post_id: str
    company_id: str
    group_id: Optional[str]
    author_id: str
    type: PostType
    status: PostStatus
    title: Optional[str]
    rich_text: str
    is_pinned: bool
    poll: Optional[Poll]
    comments_count: int
    reactions_count_by_type: dict[str, int]
    reactions_total: int
    created_at: datetime
    published_at: Optional[datetime]
    deleted_at: Optional[datetime]

    @classmethod
    def from_post(cls, post: Post) -> "PostView":
        return cls(
            post_id=str(post.id),
            company_id=str(post.company_id),
            group_id=str(post.group_id) if post.group_id else None,
            author_id=str(post.author_id),
            type=post.type,
            status=post.status,
            title=post.title,
            rich_text=post.rich_text,
            is_pinned=post.is_pinned,
            poll=post.poll,
            comments_count=post.comments_count,
            reactions_count_by_type={
                reaction_type.value: count
                for reaction_type, count in post.reactions_count_by_type.items()
            },
            reactions_total=post.reactions_total,
            created_at=post.created_at,
            published_at=post.published_at,
            deleted_at=post.deleted_at,
        )
