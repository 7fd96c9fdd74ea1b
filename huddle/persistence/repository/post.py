"""PostgreSQL implementation of Post repository."""

from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence
from uuid import UUID

import logfire
from sqlalchemy import (
    ARRAY,
    Integer,
    Select,
    Text,
    and_,
    case,
    cast,
    delete,
    desc,
    false,
    func,
    select,
    update,
)
from sqlalchemy.dialects.postgresql import array
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from huddle.domain.error import TextSearchUnavailableError
from huddle.domain.model import Post
from huddle.domain.repository import FeedSearchMode, FeedSpec, PostRepository
from huddle.domain.value import (
    CompanyId,
    PostId,
    PostStatus,
    PostType,
    ReactionType,
    UserId,
)
from huddle.persistence.database import read_session
from huddle.persistence.mappers import post_to_dict, row_to_post
from huddle.persistence.repository.user import escape_like
from huddle.persistence.tables import posts_table

TEXT_SEARCH_CONFIG = "english"


def _tsvector() -> Any:
    return func.to_tsvector(TEXT_SEARCH_CONFIG, posts_table.c.rich_text)


def _tsquery(search: str) -> Any:
    return func.plainto_tsquery(TEXT_SEARCH_CONFIG, search)


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session (request transaction)
            session_factory: Factory for independent feed read sessions
        """
        self.session = session
        self.session_factory = session_factory

    def _apply_spec(self, stmt: Select, spec: FeedSpec) -> Select:
        """Add the WHERE clauses of a feed query."""
        posts = posts_table.c
        stmt = stmt.where(
            posts.company_id == spec.company_id,
            posts.deleted_at.is_(None),
            posts.status == PostStatus.PUBLISHED.value,
        )

        if spec.group_id is not None:
            stmt = stmt.where(posts.group_id == spec.group_id)
        if spec.group_ids is not None:
            stmt = stmt.where(posts.group_id.in_(list(spec.group_ids)))
        if spec.type is not None:
            stmt = stmt.where(posts.type == spec.type.value)
        if spec.exclude_type is not None:
            stmt = stmt.where(posts.type != spec.exclude_type.value)
        if spec.author_ids is not None:
            stmt = stmt.where(posts.author_id.in_(list(spec.author_ids)))
        if spec.created_from is not None:
            stmt = stmt.where(posts.created_at >= spec.created_from)
        if spec.created_to is not None:
            stmt = stmt.where(posts.created_at <= spec.created_to)

        if spec.search:
            if spec.search_mode == FeedSearchMode.FULL_TEXT:
                stmt = stmt.where(_tsvector().op("@@")(_tsquery(spec.search)))
            elif spec.search_mode == FeedSearchMode.SUBSTRING:
                pattern = f"%{escape_like(spec.search)}%"
                stmt = stmt.where(posts.rich_text.ilike(pattern, escape="\\"))

        return stmt

    def _apply_order(self, stmt: Select, spec: FeedSpec) -> Select:
        posts = posts_table.c

        if spec.search and spec.search_mode == FeedSearchMode.FULL_TEXT:
            rank = func.ts_rank(_tsvector(), _tsquery(spec.search))
            return stmt.order_by(desc(rank), desc(posts.created_at), desc(posts.id))

        if spec.search and spec.search_mode == FeedSearchMode.SUBSTRING:
            return stmt.order_by(desc(posts.created_at), desc(posts.id))

        active_poll = case(
            (
                and_(
                    posts.type == PostType.POLL.value,
                    func.coalesce(posts.poll["is_closed"].as_boolean(), false())
                    == false(),
                ),
                1,
            ),
            else_=0,
        )
        return stmt.order_by(
            desc(posts.is_pinned),
            desc(active_poll),
            desc(posts.created_at),
            desc(posts.id),
        )

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        with logfire.span("post_repository.find_by_id", post_id=str(post_id)):
            stmt = select(posts_table).where(posts_table.c.id == post_id)
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Post not found", post_id=str(post_id))
                return None
            return row_to_post(row._asdict())

    async def find_feed(self, spec: FeedSpec, limit: int, offset: int) -> List[Post]:
        """Find one page of posts matching a feed query."""
        with logfire.span(
            "post_repository.find_feed",
            company_id=str(spec.company_id),
            search_mode=spec.search_mode.value,
            limit=limit,
            offset=offset,
        ):
            stmt = self._apply_order(self._apply_spec(select(posts_table), spec), spec)
            stmt = stmt.limit(limit).offset(offset)

            rows = await self._read(stmt, spec)
            posts = [row_to_post(row._asdict()) for row in rows]
            logfire.info("Found feed posts", count=len(posts))
            return posts

    async def count_feed(self, spec: FeedSpec) -> int:
        """Count posts matching a feed query."""
        with logfire.span(
            "post_repository.count_feed",
            company_id=str(spec.company_id),
            search_mode=spec.search_mode.value,
        ):
            stmt = self._apply_spec(select(func.count()).select_from(posts_table), spec)
            rows = await self._read(stmt, spec)
            return int(rows[0][0]) if rows else 0

    async def _read(self, stmt: Select, spec: FeedSpec) -> list:
        """Run a feed read on its own session.

        Raises:
            TextSearchUnavailableError: If a FULL_TEXT query fails in the database
        """
        async with read_session(self.session_factory) as session:
            try:
                result = await session.execute(stmt)
            except DBAPIError as e:
                if spec.search_mode == FeedSearchMode.FULL_TEXT:
                    logfire.warn("Full-text search failed", error=str(e))
                    raise TextSearchUnavailableError(str(e)) from e
                raise
            return list(result.fetchall())

    async def save(self, post: Post) -> Post:
        """Save a post (create or update)."""
        with logfire.span("post_repository.save", post_id=str(post.id)):
            existing = await self.find_by_id(post.id)
            post_dict = post_to_dict(post)

            if existing:
                logfire.info("Updating existing post", post_id=str(post.id))
                # Counters are maintained by atomic increments only
                for counter in ("comments_count", "reactions_count_by_type"):
                    post_dict.pop(counter)
                stmt = (
                    posts_table.update()
                    .where(posts_table.c.id == post.id)
                    .values(**post_dict)
                )
            else:
                logfire.info(
                    "Inserting new post",
                    post_id=str(post.id),
                    type=post.type.value,
                    status=post.status.value,
                )
                stmt = posts_table.insert().values(**post_dict)

            await self.session.execute(stmt)
            await self.session.flush()
            return post

    async def increment_reaction_count(
        self, post_id: PostId, reaction_type: ReactionType, delta: int
    ) -> None:
        """Atomically adjust the counter of one reaction type (minimum 0)."""
        counts = posts_table.c.reactions_count_by_type
        current = func.coalesce(counts[reaction_type.value].astext.cast(Integer), 0)
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(
                reactions_count_by_type=func.jsonb_set(
                    counts,
                    cast(array([reaction_type.value]), ARRAY(Text)),
                    func.to_jsonb(func.greatest(current + delta, 0)),
                    True,
                )
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def increment_comments_count(self, post_id: PostId, delta: int) -> None:
        """Atomically adjust the comment counter (minimum 0)."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(
                comments_count=func.greatest(posts_table.c.comments_count + delta, 0)
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def record_poll_vote(
        self,
        post_id: PostId,
        user_id: UserId,
        selections: Mapping[UUID, Sequence[UUID]],
    ) -> Optional[Post]:
        """Apply a poll vote under a row lock."""
        with logfire.span(
            "post_repository.record_poll_vote",
            post_id=str(post_id),
            user_id=str(user_id),
        ):
            stmt = (
                select(posts_table)
                .where(posts_table.c.id == post_id)
                .with_for_update()
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if not row:
                return None

            post = row_to_post(row._asdict())
            poll = post.poll
            if poll is None or poll.is_closed or poll.has_voted(user_id):
                logfire.info("Poll vote not applied", post_id=str(post_id))
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

            updated_poll = poll.model_copy(
                update={
                    "questions": questions,
                    "total_participants": poll.total_participants + 1,
                    "voter_ids": [*poll.voter_ids, user_id],
                }
            )
            await self.session.execute(
                update(posts_table)
                .where(posts_table.c.id == post_id)
                .values(poll=updated_poll.model_dump(mode="json"))
            )
            await self.session.flush()
            return post.model_copy(update={"poll": updated_poll})

    async def find_purgeable_ids(
        self, company_id: CompanyId, deleted_before: datetime
    ) -> List[PostId]:
        """Find soft-deleted posts older than the retention cutoff."""
        stmt = select(posts_table.c.id).where(
            posts_table.c.company_id == company_id,
            posts_table.c.deleted_at.is_not(None),
            posts_table.c.deleted_at < deleted_before,
        )
        result = await self.session.execute(stmt)
        return [PostId(row.id) for row in result.fetchall()]

    async def delete_many(self, post_ids: Sequence[PostId]) -> int:
        """Hard-delete posts."""
        if not post_ids:
            return 0
        stmt = delete(posts_table).where(posts_table.c.id.in_(list(post_ids)))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
