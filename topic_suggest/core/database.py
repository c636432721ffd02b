"""Async SQLAlchemy database setup."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy.exc import InterfaceError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from topic_suggest.config import settings

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    pool_pre_ping=True,
    pool_recycle=300,  # Recycle connections every 5 min to avoid server-side timeouts
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a read-only database session for dependency injection.

    Suggestion requests never write, so the session is closed with a
    rollback instead of a commit.
    """
    async with async_session_maker() as session:
        try:
            yield session
        except InterfaceError:
            if not session.in_transaction():
                # Connection closed after the request already finished reading.
                logger.debug("Session connection already closed during cleanup, ignoring")
                return
            raise
        finally:
            try:
                await session.rollback()
            except InterfaceError:
                logger.warning("Rollback failed (connection likely closed)")


async def init_db() -> None:
    """Initialize database (create tables if needed)."""
    logger.info("Initializing database tables")
    from topic_suggest.models.base import Base
    import topic_suggest.models  # noqa: F401  registers page/link/category tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    logger.info("Closing database connections")
    await engine.dispose()
