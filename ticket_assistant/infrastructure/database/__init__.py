"""
Database Infrastructure
=======================

Manages database connections, session lifecycle, and engine configuration.

Uses SQLAlchemy 2.0 async: asyncpg for PostgreSQL, aiosqlite for local runs
and tests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ticket_assistant.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    """
    pass


# Global engine and session maker
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """
    Get the database engine.

    Raises:
        RuntimeError: If engine has not been initialized
    """
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_database() first.")
    return _engine


def init_database(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database engine and session maker.

    Should be called during application startup.

    Args:
        database_url: Overrides settings.database_url (used by tests)
    """
    global _engine, _session_maker

    # asyncpg expects ssl= instead of libpq's sslmode=
    url = (database_url or settings.database_url).replace("sslmode=", "ssl=")

    engine_kwargs = {"echo": settings.debug, "pool_pre_ping": True}
    if not url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["max_overflow"] = settings.db_max_overflow

    _engine = create_async_engine(url, **engine_kwargs)

    _session_maker = async_sessionmaker(
        bind=_engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Prevent lazy loading after commit
        autoflush=False,
    )

    return _engine


async def close_database() -> None:
    """Dispose of the engine's connections. Called during shutdown."""
    global _engine, _session_maker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_maker = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator for database sessions.

    For use with FastAPI's Depends() - FastAPI handles the lifecycle.

    Usage in FastAPI:
        @router.get("/tickets")
        async def list_tickets(session: AsyncSession = Depends(get_session)):
            ...
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions.

    For use in background tasks and scripts, outside request scope.

    Usage:
        async with get_session_context() as session:
            ...
    """
    if _session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with _session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """
    Create all database tables.

    Development/testing helper; production schemas belong in migrations.
    """
    # Import models so they register on Base.metadata
    from ticket_assistant.auth.infrastructure import models as _auth_models  # noqa: F401
    from ticket_assistant.tickets.infrastructure import models as _ticket_models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
