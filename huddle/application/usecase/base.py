"""Base use case and shared orchestration helpers."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Optional, TypeVar

import logfire

from huddle.domain.model.post import Post
from huddle.domain.service import MicrocacheService

T = TypeVar("T")


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


async def best_effort(
    awaitable: Awaitable[T], operation: str, **context: Any
) -> Optional[T]:
    """Await a side effect whose failure must not fail the request.

    Args:
        awaitable: Side effect (cache bust, point award, perf sample)
        operation: Name used in the warning
        **context: Extra log attributes

    Returns:
        The side effect's result, or None if it raised
    """
    try:
        return await awaitable
    except Exception as e:
        logfire.warn(
            "Side effect failed", operation=operation, error=str(e), **context
        )
        return None


async def invalidate_post(
    microcache: MicrocacheService,
    slug: str,
    post: Post,
    feeds: bool = True,
) -> None:
    """Bust the cache scopes a post change is visible in.

    Args:
        microcache: Microcache service
        slug: Tenant slug
        post: Changed post
        feeds: Also bust the tenant feed and the post's group feed
    """
    await best_effort(
        microcache.bust_post(slug, post.id), "bust_post", post_id=str(post.id)
    )
    if not feeds:
        return
    await best_effort(microcache.bust_tenant(slug), "bust_tenant", slug=slug)
    if post.group_id is not None:
        await best_effort(
            microcache.bust_group(slug, post.group_id),
            "bust_group",
            group_id=str(post.group_id),
        )
