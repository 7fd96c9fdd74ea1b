"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping. JSONB columns hold
the JSON form of nested value objects.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from huddle.domain.model import (
    Attachment,
    Comment,
    Company,
    CompanyPolicies,
    GamificationSettings,
    Group,
    Poll,
    PointEvent,
    PointMeta,
    Post,
    Reaction,
    User,
)
from huddle.domain.value import (
    AttachmentId,
    CommentId,
    CommentStatus,
    CompanyId,
    GroupId,
    PointAction,
    PointEventId,
    PostId,
    PostStatus,
    PostType,
    ReactionId,
    ReactionType,
    TargetType,
    UserId,
    UserRole,
)
from huddle.domain.value.types import TenantSlug


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> Optional[UUID]:
    return None if value is None else _uuid(value)


def row_to_company(row: Dict[str, Any]) -> Company:
    """Convert database row to Company domain model.

    Args:
        row: Database row as dict

    Returns:
        Company domain model
    """
    return Company(
        id=CompanyId(_uuid(row["id"])),
        slug=TenantSlug(row["slug"]),
        name=row["name"],
        is_active=row["is_active"],
        policies=CompanyPolicies.model_validate(row.get("policies") or {}),
        gamification=GamificationSettings.model_validate(row.get("gamification") or {}),
    )


def company_to_dict(company: Company) -> Dict[str, Any]:
    """Convert Company domain model to database dict."""
    return {
        "id": company.id,
        "slug": company.slug.root,
        "name": company.name,
        "is_active": company.is_active,
        "policies": company.policies.model_dump(mode="json"),
        "gamification": company.gamification.model_dump(mode="json"),
    }


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        full_name=row["full_name"],
        title=row.get("title"),
        email=row.get("email"),
        role=UserRole(row["role"]),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return user.model_dump()


def row_to_group(row: Dict[str, Any]) -> Group:
    """Convert database row to Group domain model."""
    return Group(
        id=GroupId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        name=row["name"],
        owner_ids=[UserId(_uuid(v)) for v in row.get("owner_ids") or []],
        moderator_ids=[UserId(_uuid(v)) for v in row.get("moderator_ids") or []],
        member_ids=[UserId(_uuid(v)) for v in row.get("member_ids") or []],
    )


def group_to_dict(group: Group) -> Dict[str, Any]:
    """Convert Group domain model to database dict."""
    return group.model_dump()


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    raw_counts = row.get("reactions_count_by_type") or {}
    counts = {reaction_type: 0 for reaction_type in ReactionType}
    for key, value in raw_counts.items():
        reaction_type = ReactionType.parse(key)
        if reaction_type is not None:
            counts[reaction_type] = max(0, int(value))

    poll = row.get("poll")
    return Post(
        id=PostId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        group_id=GroupId(_uuid(row["group_id"])) if row.get("group_id") else None,
        author_id=UserId(_uuid(row["author_id"])),
        type=PostType(row["type"]),
        status=PostStatus(row["status"]),
        title=row.get("title"),
        rich_text=row.get("rich_text") or "",
        is_pinned=row["is_pinned"],
        poll=Poll.model_validate(poll) if poll else None,
        comments_count=max(0, row["comments_count"]),
        reactions_count_by_type=counts,
        views_count=row.get("views_count", 0),
        created_at=row["created_at"],
        published_at=row.get("published_at"),
        deleted_at=row.get("deleted_at"),
        deleted_by=_optional_uuid(row.get("deleted_by")),
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict.

    Args:
        post: Post domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = post.model_dump(exclude={"poll", "reactions_count_by_type"})
    data["poll"] = post.poll.model_dump(mode="json") if post.poll else None
    data["reactions_count_by_type"] = {
        reaction_type.value: count
        for reaction_type, count in post.reactions_count_by_type.items()
    }
    return data


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    parent = row.get("parent_comment_id")
    return Comment(
        id=CommentId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        content=row["content"],
        parent_comment_id=CommentId(_uuid(parent)) if parent else None,
        level=row["level"],
        status=CommentStatus(row["status"]),
        replies_count=max(0, row["replies_count"]),
        created_at=row["created_at"],
        deleted_at=row.get("deleted_at"),
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict."""
    return comment.model_dump()


def row_to_reaction(row: Dict[str, Any]) -> Reaction:
    """Convert database row to Reaction domain model."""
    return Reaction(
        id=ReactionId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        target_type=TargetType(row["target_type"]),
        target_id=_uuid(row["target_id"]),
        type=ReactionType(row["type"]),
        created_at=row["created_at"],
    )


def reaction_to_dict(reaction: Reaction) -> Dict[str, Any]:
    """Convert Reaction domain model to database dict."""
    return reaction.model_dump()


def row_to_attachment(row: Dict[str, Any]) -> Attachment:
    """Convert database row to Attachment domain model."""
    return Attachment(
        id=AttachmentId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        target_type=TargetType(row["target_type"]),
        target_id=_uuid(row["target_id"]),
        storage_url=row["storage_url"],
        created_at=row["created_at"],
    )


def attachment_to_dict(attachment: Attachment) -> Dict[str, Any]:
    """Convert Attachment domain model to database dict."""
    return attachment.model_dump()


def row_to_point_event(row: Dict[str, Any]) -> PointEvent:
    """Convert database row to PointEvent domain model.

    Args:
        row: Database row as dict

    Returns:
        PointEvent domain model
    """
    return PointEvent(
        id=PointEventId(_uuid(row["id"])),
        company_id=CompanyId(_uuid(row["company_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        actor_user_id=_optional_uuid(row.get("actor_user_id")),
        action=PointAction(row["action"]),
        points=row["points"],
        event_key=row["event_key"],
        target_type=TargetType(row["target_type"]),
        target_id=_uuid(row["target_id"]),
        meta=PointMeta.model_validate(row.get("meta") or {}),
        created_at=row["created_at"],
    )


def point_event_to_dict(event: PointEvent) -> Dict[str, Any]:
    """Convert PointEvent domain model to database dict."""
    data = event.model_dump(exclude={"meta"})
    data["meta"] = event.meta.model_dump(mode="json", exclude_none=True)
    return data
