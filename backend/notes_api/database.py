"""
Notes API: Engine and Session Construction
===========================================

What:  Builders for the async SQLAlchemy engine and session factory, plus the
       declarative Base shared by the ORM models.
How:   Nothing is created at import time. The lifespan hook in main.py calls
       `build_engine()` once and hands the engine to NoteStore, which owns
       it for the rest of the process.

Connection Pooling:
    pool_size / max_overflow: from settings (PostgreSQL and other servers)
    pool_pre_ping:            validates pooled connections before use
    pool_recycle=3600:        recycles connections hourly
    SQLite URLs get SQLAlchemy's default pool and no sizing arguments.
"""

from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Args:
        settings: Application settings (URL, pool sizing, log level)

    Returns:
        An AsyncEngine. No connection is opened until first use.
    """
    options: Dict[str, Any] = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to `engine`.

    expire_on_commit=False keeps attributes readable after commit, so a Note
    can be serialized once its session is closed.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
