"""FastAPI dependency injection helpers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from route_profit.config import settings
from route_profit.domain.calculator import Geocoder, RouteCalculator
from route_profit.infrastructure.database import async_session_factory
from route_profit.infrastructure.geocoder import NominatimGeocoder
from route_profit.infrastructure.repositories import RouteHistoryRepository


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_geocoder() -> Geocoder:
    return NominatimGeocoder()


def get_calculator(geocoder: Geocoder = Depends(get_geocoder)) -> RouteCalculator:
    return RouteCalculator(
        geocoder,
        average_speed_kmh=settings.average_speed_kmh,
        parallel=settings.geocode_parallel,
    )


def get_history(db: AsyncSession = Depends(get_db)) -> RouteHistoryRepository:
    return RouteHistoryRepository(db)
