"""
Async SQLAlchemy engine and session factory.

The default store is an embedded SQLite file accessed through
``aiosqlite``; any async SQLAlchemy URL works (e.g. ``postgresql+asyncpg``)
as long as the driver is installed.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from route_profit.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"echo": False}
    return {"echo": False, "pool_size": 5, "max_overflow": 5}


engine = create_async_engine(settings.database_url, **_engine_options(settings.database_url))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create missing tables (the embedded store has no migration step)."""
    from . import models  # noqa: F401  -- registers tables on Base.metadata

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
