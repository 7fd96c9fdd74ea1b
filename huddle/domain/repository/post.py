"""Post repository interface and the feed match criteria."""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import List, Mapping, Optional, Sequence
from uuid import UUID

from huddle.domain.model.post import Post
from huddle.domain.value import (
    CompanyId,
    GroupId,
    PostId,
    PostType,
    ReactionType,
    UserId,
)
from huddle.domain.value.common import ValueObject


class FeedSearchMode(str, Enum):
    """How the text query of a feed is matched and ranked."""

    NONE = "none"  # pinned, active poll, recency
    FULL_TEXT = "full_text"  # text index, relevance then recency
    SUBSTRING = "substring"  # case-insensitive scan, recency


class FeedSpec(ValueObject):
    """Match criteria for feed queries.

    Published, non-deleted posts of the company are always implied. ``None``
    means "no restriction"; an empty list means "matches nothing".
    """

    company_id: CompanyId
    group_id: Optional[GroupId] = None
    group_ids: Optional[List[GroupId]] = None
    type: Optional[PostType] = None
    exclude_type: Optional[PostType] = None
    author_ids: Optional[List[UserId]] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    search: Optional[str] = None
    search_mode: FeedSearchMode = FeedSearchMode.NONE

    @property
    def matches_nothing(self) -> bool:
        """Whether an empty restriction set rules out every post."""
        return (self.group_ids is not None and not self.group_ids) or (
            self.author_ids is not None and not self.author_ids
        )

    def with_search_mode(self, mode: FeedSearchMode) -> "FeedSpec":
        return self.model_copy(update={"search_mode": mode})


class PostRepository(ABC):
    """Repository for Post aggregate.

    Defines the contract for post persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found (including soft-deleted), None otherwise
        """
        pass

    @abstractmethod
    async def find_feed(self, spec: FeedSpec, limit: int, offset: int) -> List[Post]:
        """Find one page of posts matching a feed query.

        Ordering depends on ``spec.search_mode``:
        - NONE: pinned first, then active polls, then newest, then ID
        - FULL_TEXT: text relevance, then newest
        - SUBSTRING: newest, then ID

        Args:
            spec: Feed match criteria
            limit: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            Ordered posts

        Raises:
            TextSearchUnavailableError: If FULL_TEXT cannot be served
        """
        pass

    @abstractmethod
    async def count_feed(self, spec: FeedSpec) -> int:
        """Count posts matching a feed query.

        Args:
            spec: Feed match criteria

        Returns:
            Total number of matching posts

        Raises:
            TextSearchUnavailableError: If FULL_TEXT cannot be served
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a post (create or update).

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def increment_reaction_count(
        self, post_id: PostId, reaction_type: ReactionType, delta: int
    ) -> None:
        """Atomically adjust the counter of one reaction type.

        Args:
            post_id: The post ID
            reaction_type: Counter to adjust
            delta: Signed amount (counters never drop below zero)
        """
        pass

    @abstractmethod
    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Atomically adjust the comment counter.

        Args:
            post_id: The post ID
            delta: Signed amount (counter never drops below zero)
        """
        pass

    @abstractmethod
    async def record_poll_vote(
        self,
        post_id: PostId,
        user_id: UserId,
        selections: Mapping[UUID, Sequence[UUID]],
    ) -> Optional[Post]:
        """Apply a poll vote under a row lock.

        Increments each selected option, the participant count and records
        the voter. Nothing is written when the poll is closed or the user
        already voted.

        Args:
            post_id: The poll post
            user_id: The voter
            selections: Question ID -> selected option IDs

        Returns:
            Updated post, or None if the vote was not applied
        """
        pass

    @abstractmethod
    async def find_purgeable_ids(
        self, company_id: CompanyId, deleted_before: datetime
    ) -> List[PostId]:
        """Find soft-deleted posts older than the retention cutoff.

        Args:
            company_id: Tenant to sweep
            deleted_before: Cutoff for ``deleted_at``

        Returns:
            IDs of posts eligible for hard deletion
        """
        pass

    @abstractmethod
    async def delete_many(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete posts.

        Args:
            post_ids: Posts to delete

        Returns:
            Number of deleted posts
        """
        pass
