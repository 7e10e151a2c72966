"""Async engine and session factory.

One AsyncSession per request. A session is a single transaction at a time:
the purchase engine and the wallet service commit or roll back it themselves,
and the repositories only ever execute statements on it. Isolation level is
configurable; row locks and unique constraints carry the purchase guarantees,
so READ COMMITTED is enough.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the catalog ORM mapping."""


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    isolation_level=settings.DB_ISOLATION_LEVEL,
)

# expire_on_commit=False: receipts are built from loaded values after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request; an open transaction is rolled back on close."""
    async with async_session_factory() as session:
        yield session
