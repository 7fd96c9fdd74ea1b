"""Feed filters and results.

Filters arrive as loosely typed query parameters. They are normalized on
construction: anything malformed becomes "not set" instead of an error.
"""

import math
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field, field_validator

from huddle.domain.model.common import DomainModel
from huddle.domain.model.post import Post
from huddle.domain.value import FeedTab, GroupId, PostType, UserId
from huddle.domain.value.common import ValueObject

_TRUTHY = {"1", "true", "yes", "on"}

MAX_QUERY_LENGTH = 200


def clamp_limit(raw: Optional[int], default: int, low: int, high: int) -> int:
    """Normalize a requested page size.

    Missing, zero and negative values fall back to the default; everything
    else is clamped into ``[low, high]``.

    Args:
        raw: Requested page size (already coerced to int or None)
        default: Page size when nothing usable was requested
        low: Smallest page size
        high: Largest page size

    Returns:
        Effective page size
    """
    if raw is None or raw <= 0:
        return default
    return max(low, min(high, raw))


def _coerce_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class FeedFilters(ValueObject):
    """Normalized feed filters. All fields are optional and combinable."""

    q: Optional[str] = None
    type: Optional[PostType] = None
    tab: Optional[FeedTab] = None
    author_id: Optional[UserId] = None
    people: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    my_groups: bool = False
    page: int = 1
    limit: Optional[int] = None

    @field_validator("q", "people", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str):
            return None
        v = v.strip()[:MAX_QUERY_LENGTH]
        return v or None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Optional[PostType]:
        return PostType.parse(v)

    @field_validator("tab", mode="before")
    @classmethod
    def normalize_tab(cls, v: Any) -> Optional[FeedTab]:
        return FeedTab.parse(v)

    @field_validator("author_id", mode="before")
    @classmethod
    def normalize_author_id(cls, v: Any) -> Optional[UUID]:
        if isinstance(v, UUID):
            return v
        if isinstance(v, str):
            try:
                return UUID(v.strip())
            except ValueError:
                return None
        return None

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Optional[date]:
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if isinstance(v, str) and v.strip():
            raw = v.strip()
            try:
                return date.fromisoformat(raw[:10])
            except ValueError:
                return None
        return None

    @field_validator("my_groups", mode="before")
    @classmethod
    def normalize_flag(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in _TRUTHY
        if isinstance(v, int):
            return v != 0
        return False

    @field_validator("page", mode="before")
    @classmethod
    def normalize_page(cls, v: Any) -> int:
        page = _coerce_int(v)
        if page is None or page < 1:
            return 1
        return page

    @field_validator("limit", mode="before")
    @classmethod
    def normalize_limit(cls, v: Any) -> Optional[int]:
        return _coerce_int(v)


class GroupStub(ValueObject):
    """Minimal group reference attached to feed items."""

    id: GroupId
    name: str


class FeedItem(DomainModel):
    """A post as it appears in a feed page."""

    post: Post
    thumbnails: list[str] = Field(default_factory=list)
    group: Optional[GroupStub] = None
    excerpt: Optional[str] = None


class FeedResult(DomainModel):
    """One page of a feed."""

    posts: list[FeedItem]
    total: int = Field(ge=0)
    total_pages: int = Field(ge=1)
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
