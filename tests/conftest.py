"""Test configuration and fixtures."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from huddle.domain.model import Company, CompanyPolicies, GamificationSettings, Post, User
from huddle.domain.value import (
    CompanyId,
    GroupId,
    PostId,
    PostingMode,
    PostType,
    UserId,
    UserRole,
)
from huddle.domain.value.types import TenantSlug


def make_company(
    slug: str = "acme",
    posting_mode: PostingMode = PostingMode.OPEN,
    gamification: Optional[GamificationSettings] = None,
    retention_days: int = 730,
) -> Company:
    """Helper function to build a tenant for tests."""
    return Company(
        id=CompanyId(uuid4()),
        slug=TenantSlug(slug),
        name=slug.title(),
        policies=CompanyPolicies(posting_mode=posting_mode, retention_days=retention_days),
        gamification=gamification or GamificationSettings.with_default_rules(),
    )


def make_user(
    company: Company,
    full_name: str = "Ada Lovelace",
    title: Optional[str] = None,
    role: UserRole = UserRole.MEMBER,
) -> User:
    """Helper function to build a tenant member for tests."""
    return User(
        id=UserId(uuid4()),
        company_id=company.id,
        full_name=full_name,
        title=title,
        role=role,
    )


def make_post(
    company: Company,
    author: User,
    rich_text: str = "<p>Hello team</p>",
    type: PostType = PostType.TEXT,
    created_at: Optional[datetime] = None,
    group_id: Optional[GroupId] = None,
    **extra,
) -> Post:
    """Helper function to build a published post for tests.

    Args:
        company: Tenant
        author: Author
        rich_text: HTML body
        type: Post type
        created_at: Creation time (defaults to now)
        group_id: Optional group
        **extra: Any other Post field
    """
    return Post(
        id=PostId(uuid4()),
        company_id=company.id,
        author_id=author.id,
        type=type,
        rich_text=rich_text,
        group_id=group_id,
        created_at=created_at or datetime.now(timezone.utc),
        **extra,
    )


def at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
