"""
Database engine and session management for the primary backend
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
import logging

from app.config import settings

logger = logging.getLogger(__name__)

# Create declarative base
Base = declarative_base()


def create_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for the configured database
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=settings.DB_ECHO)

    # Bounded so an unreachable host fails the startup probe quickly
    connect_args = {"timeout": settings.DB_CONNECT_TIMEOUT} if "+asyncpg" in database_url else {}

    if settings.is_testing:
        # NullPool doesn't accept pool parameters
        return create_async_engine(
            database_url,
            echo=settings.DB_ECHO,
            poolclass=NullPool,
            connect_args=connect_args,
        )

    return create_async_engine(
        database_url,
        echo=settings.DB_ECHO,
        connect_args=connect_args,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory bound to the engine
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine):
    """
    Open a connection and create missing tables
    """
    # Register the tables on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized successfully")


async def close_db(engine: AsyncEngine):
    """
    Close database connections
    """
    await engine.dispose()
    logger.info("Database connections closed")
