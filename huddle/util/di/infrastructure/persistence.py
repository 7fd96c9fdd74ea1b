"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from huddle.config import Settings
from huddle.domain.repository import (
    AttachmentRepository,
    CommentRepository,
    CompanyRepository,
    GroupRepository,
    PointEventRepository,
    PostRepository,
    ReactionRepository,
    UserRepository,
)
from huddle.persistence.database import create_engine, create_session_factory
from huddle.persistence.repository import (
    PostgresAttachmentRepository,
    PostgresCommentRepository,
    PostgresCompanyRepository,
    PostgresGroupRepository,
    PostgresPointEventRepository,
    PostgresPostRepository,
    PostgresReactionRepository,
    PostgresUserRepository,
)
from huddle.util.di.base import ProviderBase
from huddle.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine (disposed on shutdown)."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_company_repository(self, session: AsyncSession) -> CompanyRepository:
        """Provide Company repository."""
        return PostgresCompanyRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_group_repository(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> GroupRepository:
        """Provide Group repository."""
        return PostgresGroupRepository(session, session_factory)

    @provide(scope=Scope.REQUEST)
    def get_post_repository(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> PostRepository:
        """Provide Post repository."""
        return PostgresPostRepository(session, session_factory)

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, session: AsyncSession) -> CommentRepository:
        """Provide Comment repository."""
        return PostgresCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_reaction_repository(self, session: AsyncSession) -> ReactionRepository:
        """Provide Reaction repository."""
        return PostgresReactionRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_attachment_repository(
        self,
        session: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> AttachmentRepository:
        """Provide Attachment repository."""
        return PostgresAttachmentRepository(session, session_factory)

    @provide(scope=Scope.REQUEST)
    def get_point_event_repository(
        self, session: AsyncSession
    ) -> PointEventRepository:
        """Provide points ledger repository."""
        return PostgresPointEventRepository(session)
