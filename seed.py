"""
Seed script -- populates the history with sample routes for reviewers.

Run once (tables are created if missing):
    python seed.py

Creates 8 calculated routes (one operating at a loss) for 4 drivers.
Coordinates are fixed below, so seeding never calls the geocoding service.
"""

import asyncio
from datetime import datetime, timedelta, timezone

from route_profit.domain.calculator import RouteCalculator
from route_profit.domain.entities import Coordinate, Destination
from route_profit.infrastructure.database import async_session_factory, engine, init_db
from route_profit.infrastructure.repositories import RouteHistoryRepository

CITY_COORDINATES = {
    "São Paulo, SP": Coordinate(-23.5505, -46.6333),
    "Rio de Janeiro, RJ": Coordinate(-22.9068, -43.1729),
    "Belo Horizonte, MG": Coordinate(-19.9167, -43.9345),
    "Curitiba, PR": Coordinate(-25.4284, -49.2733),
    "Florianópolis, SC": Coordinate(-27.5954, -48.5480),
    "Porto Alegre, RS": Coordinate(-30.0346, -51.2177),
    "Caxias do Sul, RS": Coordinate(-29.1678, -51.1794),
    "Salvador, BA": Coordinate(-12.9714, -38.5014),
    "Recife, PE": Coordinate(-8.0476, -34.8770),
    "Campinas, SP": Coordinate(-22.9099, -47.0626),
    "Santos, SP": Coordinate(-23.9608, -46.3336),
}


class StaticGeocoder:
    async def resolve(self, city):
        return CITY_COORDINATES.get(city)


def _dest(city, packages, value):
    return Destination(id=city, city=city, packages=packages, value_per_package=value)


ROUTES = [
    ("João Silva", "São Paulo, SP", [_dest("Rio de Janeiro, RJ", 25, 25.5), _dest("Belo Horizonte, MG", 25, 25.5)], 400.0),
    ("João Silva", "São Paulo, SP", [_dest("Rio de Janeiro, RJ", 50, 25.5)], 400.0),
    ("Maria Santos", "Curitiba, PR", [_dest("Florianópolis, SC", 25, 30.0), _dest("Porto Alegre, RS", 25, 30.0), _dest("Caxias do Sul, RS", 25, 30.0)], 600.0),
    ("Maria Santos", "Curitiba, PR", [_dest("Florianópolis, SC", 40, 28.0)], 350.0),
    ("Pedro Costa", "Salvador, BA", [_dest("Recife, PE", 30, 40.0)], 350.0),
    ("Pedro Costa", "Salvador, BA", [_dest("Recife, PE", 12, 18.0)], 420.0),  # loss-making
    ("Ana Oliveira", "São Paulo, SP", [_dest("Campinas, SP", 60, 12.0), _dest("Santos, SP", 40, 12.0)], 380.0),
    ("Ana Oliveira", "Campinas, SP", [_dest("São Paulo, SP", 80, 11.5)], 290.0),
]


async def seed():
    await init_db()
    async with async_session_factory() as session:
        repo = RouteHistoryRepository(session)
        # Check if already seeded
        if await repo.count() > 0:
            print("History already seeded. Skipping.")
            return

        calculator = RouteCalculator(StaticGeocoder())
        start = datetime.now(timezone.utc) - timedelta(days=len(ROUTES))
        for day, (driver, origin, destinations, cost) in enumerate(ROUTES):
            result = await calculator.calculate(driver, origin, destinations, cost)
            await repo.append(result, now=start + timedelta(days=day))
        await session.commit()
        print(f"  Created {len(ROUTES)} history entries")
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
