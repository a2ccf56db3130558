"""Database session factory bootstrap (SQLAlchemy async).

Environment Variables:
- DATABASE_URL: PostgreSQL connection string, or a sqlite+aiosqlite URL
  for local use
- SQLALCHEMY_ECHO: Log SQL statements when "1", "true" or "yes"

Usage:
    from tech_radar.bootstrap.database import get_session_factory

    session_factory = get_session_factory()
    async with session_factory() as session:
        ...
"""

from __future__ import annotations

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from structlog import get_logger

logger = get_logger()

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None


def get_database_url(url: str | None = None) -> str:
    """Resolve the database URL in an async driver format.

    PostgreSQL URLs are converted to postgresql+asyncpg. URLs that already
    name an async driver (for example sqlite+aiosqlite) are kept.

    Args:
        url: Explicit URL; DATABASE_URL is read when omitted.

    Raises:
        ValueError: If no URL is configured.
    """
    url = url or os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError(
            "DATABASE_URL environment variable not set. "
            "Required for the sql store backend."
        )

    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if "://" not in url:
        return f"postgresql+asyncpg://{url}"
    return url


def _masked(url: str) -> str:
    if "@" not in url:
        return url
    before_at, after_at = url.split("@", 1)
    if ":" in before_at.split("://", 1)[-1]:
        return f"{before_at.rsplit(':', 1)[0]}:***@{after_at}"
    return url


def create_engine(url: str) -> AsyncEngine:
    """Create an async engine for a resolved URL.

    In-memory SQLite shares one connection so every session sees the
    same database.
    """
    echo = os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes")
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def get_session_factory(url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Get the SQLAlchemy async session factory.

    Creates a singleton engine and factory on first call.

    Raises:
        ValueError: If no database URL is configured.
    """
    global _session_factory, _engine

    if _session_factory is None:
        log = logger.bind(component="database_bootstrap")
        resolved = get_database_url(url)
        log.info("creating_database_engine", url=_masked(resolved))
        _engine = create_engine(resolved)
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        log.info("database_session_factory_created")

    return _session_factory


def get_engine() -> AsyncEngine | None:
    return _engine


def reset_database_bootstrap() -> None:
    """Reset database singleton for testing."""
    global _session_factory, _engine
    _session_factory = None
    _engine = None


async def close_database_engine() -> None:
    """Close the database engine (for graceful shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
