"""
Database engine and session management for Country Cache.

Provides async SQLAlchemy engine, session factory, and connection utilities.
SQLite (aiosqlite) is the default store; any async SQLAlchemy URL works.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from country_cache.config import Config
from country_cache.database.models import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url() -> str:
    """Return the configured async database URL."""
    return Config.DATABASE_URL


def safe_url(url: str) -> str:
    """Strip credentials before logging a URL."""
    return url.split("@")[-1] if "@" in url else url


def get_engine(
    url: Optional[str] = None,
    echo: bool = Config.DB_ECHO,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
) -> AsyncEngine:
    """
    Get or create async SQLAlchemy engine.

    Args:
        url: Database URL (defaults to config)
        echo: Log all SQL statements
        pool_size: Number of connections in pool (ignored for SQLite)
        max_overflow: Max overflow connections (ignored for SQLite)
        pool_pre_ping: Test connections before use

    Returns:
        AsyncEngine instance
    """
    global _engine

    if _engine is None:
        db_url = url or get_database_url()
        logger.info(f"Creating async database engine: {safe_url(db_url)}")

        if db_url.startswith("sqlite"):
            _engine = create_async_engine(db_url, echo=echo)
        else:
            _engine = create_async_engine(
                db_url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
            )

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get or create async session factory.

    Returns:
        Async session maker bound to engine
    """
    global _session_factory

    if _session_factory is None:
        engine = get_engine()
        _session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get async database session (FastAPI dependency).

    Repositories commit explicitly; anything left uncommitted when the
    request ends is rolled back.

    Yields:
        AsyncSession instance
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions outside a request.

    Usage:
        async with get_db_session() as session:
            await session.execute(...)

    Yields:
        AsyncSession instance
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(drop_all: bool = False) -> None:
    """
    Initialize database schema.

    Args:
        drop_all: Drop all existing tables first (DANGEROUS!)
    """
    engine = get_engine()

    async with engine.begin() as conn:
        if drop_all:
            logger.warning("Dropping all database tables!")
            await conn.run_sync(Base.metadata.drop_all)

        logger.info("Creating database tables...")
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialization complete")


async def close_db() -> None:
    """Close database engine and cleanup connections."""
    global _engine, _session_factory

    if _engine:
        logger.info("Closing database engine")
        await _engine.dispose()
        _engine = None
        _session_factory = None
