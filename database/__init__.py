"""
PostgreSQL access for projects, messages and profiles.

One async engine per process. Request handlers get a session through
get_session(), which commits when the handler returns and rolls back when it
raises, so a failed generation leaves no rows and no consumed image quota.
"""

import logging
import time
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


async def init_database(settings: Settings | None = None) -> None:
    """Create the engine and session factory if a database URL is configured."""
    global _engine, _sessionmaker

    settings = settings or get_settings()
    if not settings.is_database_configured:
        logger.info("Database disabled or DATABASE_URL missing, skipping engine setup")
        return

    _engine = create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.db_echo,
    )
    # Objects stay usable after commit; routers serialize them afterwards.
    _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)
    logger.info(f"Database engine ready (pool_size={settings.db_pool_size})")


async def close_database() -> None:
    """Dispose of the engine. Safe to call when it was never created."""
    global _engine, _sessionmaker

    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _sessionmaker = None
    logger.info("Database engine disposed")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session wrapped in one transaction."""
    if _sessionmaker is None:
        raise RuntimeError("Database not initialized")

    async with _sessionmaker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def is_database_available() -> bool:
    return _sessionmaker is not None


async def ping_database() -> float:
    """Latency of SELECT 1 in milliseconds."""
    if _engine is None:
        raise RuntimeError("Database not initialized")

    start = time.perf_counter()
    async with _engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return (time.perf_counter() - start) * 1000


__all__ = [
    "init_database",
    "close_database",
    "get_session",
    "is_database_available",
    "ping_database",
]
