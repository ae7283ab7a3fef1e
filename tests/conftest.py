"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without a
database server or Redis, and a fake geocoder with fixed coordinates so
no test ever reaches the network.
"""

import os

# Must be set before route_profit.config is imported anywhere
os.environ.setdefault("ROUTE_PROFIT_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ROUTE_PROFIT_HISTORY_LOCK_ENABLED", "false")

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from route_profit.domain.calculator import RouteCalculator
from route_profit.domain.entities import Coordinate, Destination
from route_profit.domain.errors import GeocoderUnavailable
from route_profit.infrastructure import models  # noqa: F401
from route_profit.infrastructure.database import Base


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# StaticPool: every session shares the single in-memory database
test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# ── Fake geocoder ─────────────────────────────────────────────────────

CITY_COORDINATES = {
    "São Paulo, SP": Coordinate(-23.5506507, -46.6333824),
    "Rio de Janeiro, RJ": Coordinate(-22.9110137, -43.2093727),
    "Belo Horizonte, MG": Coordinate(-19.9227318, -43.9450948),
    "Curitiba, PR": Coordinate(-25.4295963, -49.2712724),
    "Florianópolis, SC": Coordinate(-27.5973002, -48.5496098),
    "Salvador, BA": Coordinate(-12.9822499, -38.4812772),
    "Recife, PE": Coordinate(-8.0584933, -34.8848193),
    "Manaus, AM": Coordinate(-3.1316333, -59.9825041),
}


class FakeGeocoder:
    """Resolves cities from ``CITY_COORDINATES`` and records every lookup."""

    def __init__(self, unavailable: bool = False):
        self.calls: list[str] = []
        self.unavailable = unavailable

    async def resolve(self, city: str) -> Optional[Coordinate]:
        self.calls.append(city)
        if self.unavailable:
            raise GeocoderUnavailable("timed out after 10s")
        return CITY_COORDINATES.get(city)


def make_destinations(*specs: tuple[str, int, float]) -> tuple[Destination, ...]:
    return tuple(
        Destination(id=str(i), city=city, packages=packages, value_per_package=value)
        for i, (city, packages, value) in enumerate(specs, start=1)
    )


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def calculator(geocoder: FakeGeocoder) -> RouteCalculator:
    return RouteCalculator(geocoder)


@pytest_asyncio.fixture
async def client(geocoder: FakeGeocoder):
    """AsyncClient backed by in-memory SQLite and the fake geocoder."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def _test_db():
        async with TestSessionFactory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from route_profit.api.app import create_app
    from route_profit.api.dependencies import get_db, get_geocoder
    from route_profit.api.middleware import limiter

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    app.dependency_overrides[get_geocoder] = lambda: geocoder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
