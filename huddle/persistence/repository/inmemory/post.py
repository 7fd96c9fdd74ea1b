"""In-memory post repository for testing."""

import re
from datetime import datetime
from typing import List, Mapping, Optional, Sequence
from uuid import UUID

from huddle.domain.error import TextSearchUnavailableError
from huddle.domain.model.post import Post
from huddle.domain.repository.post import FeedSearchMode, FeedSpec, PostRepository
from huddle.domain.value import CompanyId, PostId, ReactionType, UserId
from huddle.util.text import strip_markup

_WORD = re.compile(r"\w+", re.UNICODE)


def _words(text: str) -> list[str]:
    return _WORD.findall(text.lower())


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing.

    Full-text search is approximated: every query word must appear in the
    markup-free body, and relevance is the number of occurrences.
    """

    def __init__(self, text_search_available: bool = True) -> None:
        self._posts: dict[PostId, Post] = {}
        self.text_search_available = text_search_available

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._posts.get(post_id)

    def _relevance(self, post: Post, search: str) -> int:
        body = _words(strip_markup(post.rich_text))
        terms = _words(search)
        if not terms or any(term not in body for term in terms):
            return 0
        return sum(body.count(term) for term in terms)

    def _matches(self, post: Post, spec: FeedSpec) -> bool:
        if post.company_id != spec.company_id or not post.is_visible:
            return False
        if spec.group_id is not None and post.group_id != spec.group_id:
            return False
        if spec.group_ids is not None and post.group_id not in spec.group_ids:
            return False
        if spec.type is not None and post.type != spec.type:
            return False
        if spec.exclude_type is not None and post.type == spec.exclude_type:
            return False
        if spec.author_ids is not None and post.author_id not in spec.author_ids:
            return False
        if spec.created_from is not None and post.created_at < spec.created_from:
            return False
        if spec.created_to is not None and post.created_at > spec.created_to:
            return False
        if spec.search:
            if spec.search_mode == FeedSearchMode.FULL_TEXT:
                return self._relevance(post, spec.search) > 0
            if spec.search_mode == FeedSearchMode.SUBSTRING:
                return spec.search.lower() in post.rich_text.lower()
        return True

    def _select(self, spec: FeedSpec) -> List[Post]:
        full_text = bool(spec.search) and spec.search_mode == FeedSearchMode.FULL_TEXT
        if full_text and not self.text_search_available:
            raise TextSearchUnavailableError("Text index not available")

        posts = [p for p in self._posts.values() if self._matches(p, spec)]

        if full_text:
            assert spec.search is not None
            search = spec.search
            posts.sort(
                key=lambda p: (self._relevance(p, search), p.created_at, p.id),
                reverse=True,
            )
        elif spec.search and spec.search_mode == FeedSearchMode.SUBSTRING:
            posts.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        else:
            posts.sort(
                key=lambda p: (p.is_pinned, p.is_active_poll, p.created_at, p.id),
                reverse=True,
            )
        return posts

    async def find_feed(self, spec: FeedSpec, limit: int, offset: int) -> List[Post]:
        """Find one page of posts matching a feed query."""
        return self._select(spec)[offset : offset + limit]

    async def count_feed(self, spec: FeedSpec) -> int:
        """Count posts matching a feed query."""
        return len(self._select(spec))

    async def save(self, post: Post) -> Post:
        """Save or update a post (counters are kept on update)."""
        existing = self._posts.get(post.id)
        if existing is not None:
            post = post.model_copy(
                update={
                    "comments_count": existing.comments_count,
                    "reactions_count_by_type": existing.reactions_count_by_type,
                }
            )
        self._posts[post.id] = post
        return post

    async def increment_reaction_count(
        self, post_id: PostId, reaction_type: ReactionType, delta: int
    ) -> None:
        """Adjust the counter of one reaction type (minimum 0)."""
        post = self._posts.get(post_id)
        if post is None:
            return
        counts = dict(post.reactions_count_by_type)
        counts[reaction_type] = max(0, counts.get(reaction_type, 0) + delta)
        self._posts[post_id] = post.model_copy(
            update={"reactions_count_by_type": counts}
        )

    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Adjust the comment counter (minimum 0)."""
        post = self._posts.get(post_id)
        if post is None:
            return
        self._posts[post_id] = post.model_copy(
            update={"comments_count": max(0, post.comments_count + delta)}
        )

    async def record_poll_vote(
        self,
        post_id: PostId,
        user_id: UserId,
        selections: Mapping[UUID, Sequence[UUID]],
    ) -> Optional[Post]:
        """Apply a poll vote."""
        post = self._posts.get(post_id)
        if post is None or post.poll is None:
            return None
        poll = post.poll
        if poll.is_closed or poll.has_voted(user_id):
            return None

        questions = []
        for question in poll.questions:
            chosen = set(selections.get(question.id, []))
            options = [
                option.model_copy(update={"votes_count": option.votes_count + 1})
                if option.id in chosen
                else option
                for option in question.options
            ]
            questions.append(question.model_copy(update={"options": options}))

        updated = post.model_copy(
            update={
                "poll": poll.model_copy(
                    update={
                        "questions": questions,
                        "total_participants": poll.total_participants + 1,
                        "voter_ids": [*poll.voter_ids, user_id],
                    }
                )
            }
        )
        self._posts[post_id] = updated
        return updated

    async def find_purgeable_ids(
        self, company_id: CompanyId, deleted_before: datetime
    ) -> List[PostId]:
        """Find soft-deleted posts older than the retention cutoff."""
        return [
            p.id
            for p in self._posts.values()
            if p.company_id == company_id
            and p.deleted_at is not None
            and p.deleted_at < deleted_before
        ]

    async def delete_many(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete posts."""
        deleted = 0
        for post_id in post_ids:
            if self._posts.pop(post_id, None) is not None:
                deleted += 1
        return deleted
