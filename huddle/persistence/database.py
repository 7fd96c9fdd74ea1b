"""Async engine and session factories for PostgreSQL."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from huddle.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine.

    Connections are tagged with ``application_name`` so feed queries can be
    told apart in ``pg_stat_activity``.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        connect_args={"server_settings": {"application_name": "huddle"}},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory shared by request and read sessions."""
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def read_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a short-lived session for one side query.

    A feed page loads its rows, total count, thumbnails and group stubs
    concurrently. One ``AsyncSession`` cannot run statements in parallel, so
    each side query gets its own session outside the request transaction.
    Nothing is committed.

    Args:
        session_factory: Factory for creating sessions

    Yields:
        Session that is rolled back and closed on exit
    """
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
