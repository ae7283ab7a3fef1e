"""
Route Financial Engine
======================

Pipeline for one route (origin -> destinations in input order):

1. **Validate**   -- required cities present, amounts finite and >= 0,
   destination ids unique.  Nothing is looked up when validation fails.
2. **Geocode**    -- origin, then every destination.  A single miss aborts
   the whole calculation with ``CityNotFoundError``.
3. **Distances**  -- origin->d1, d_i->d_(i+1); whole-km legs summed into the
   total, so ``sum(breakdown) == total_distance`` always holds.
4. **Fuel**       -- one analysis on the total distance from the origin.
5. **Finance**    -- revenue = sum(packages x value_per_package);
   total_cost = route_cost (fuel deliberately excluded);
   profit = revenue - total_cost; margin = profit / revenue x 100 (0 when
   there is no revenue).

Travel time assumes a constant average speed (60 km/h by default).
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Protocol, Sequence

from .distance import distance_km
from .entities import (
    Coordinate,
    Destination,
    RouteRequest,
    RouteResult,
    Segment,
    safe_ratio,
)
from .errors import CityNotFoundError, CityResolutionError, GeocoderUnavailable, RouteValidationError
from .fuel import analyze_fuel

logger = logging.getLogger(__name__)

DEFAULT_AVERAGE_SPEED_KMH = 60.0


class Geocoder(Protocol):
    async def resolve(self, city: str) -> Optional[Coordinate]: ...


def _amount_error(label: str, value: float) -> Optional[str]:
    if not math.isfinite(value):
        return f"{label} must be a finite number"
    if value < 0:
        return f"{label} must be >= 0"
    return None


def validate_route(
    origin: str,
    destinations: Sequence[Destination],
    route_cost: float,
) -> list[str]:
    """Return every problem with the route input (empty list when valid)."""
    errors: list[str] = []
    if not origin or not origin.strip():
        errors.append("origin: city is required")
    if not destinations:
        errors.append("destinations: at least one destination is required")
    seen_ids: set[str] = set()
    for position, dest in enumerate(destinations, start=1):
        prefix = f"destinations[{position}]:"
        if not dest.city or not dest.city.strip():
            errors.append(f"{prefix} city is required")
        if dest.id in seen_ids:
            errors.append(f"{prefix} duplicate id")
        seen_ids.add(dest.id)
        for label, value in (
            ("packages", dest.packages),
            ("value per package", dest.value_per_package),
        ):
            problem = _amount_error(f"{prefix} {label}", value)
            if problem:
                errors.append(problem)
    problem = _amount_error("route_cost:", route_cost)
    if problem:
        errors.append(problem)
    return errors


def build_breakdown(
    origin: str,
    origin_coords: Coordinate,
    destinations: Sequence[Destination],
    destination_coords: Sequence[Coordinate],
) -> list[Segment]:
    stops = [(origin, origin_coords)] + list(
        zip((d.city for d in destinations), destination_coords)
    )
    return [
        Segment(from_city=a_city, to_city=b_city, distance=distance_km(a, b))
        for (a_city, a), (b_city, b) in zip(stops, stops[1:])
    ]


class RouteCalculator:
    """Turns a route request into a fully reconciled ``RouteResult``."""

    def __init__(
        self,
        geocoder: Geocoder,
        average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
        parallel: bool = False,
    ):
        self.geocoder = geocoder
        self.average_speed_kmh = average_speed_kmh
        self.parallel = parallel

    async def calculate_request(self, request: RouteRequest) -> RouteResult:
        return await self.calculate(
            request.driver, request.origin, request.destinations, request.route_cost
        )

    async def calculate(
        self,
        driver: str,
        origin: str,
        destinations: Sequence[Destination],
        route_cost: float = 0.0,
    ) -> RouteResult:
        errors = validate_route(origin, destinations, route_cost)
        if errors:
            raise RouteValidationError(errors)

        destinations = tuple(destinations)
        cities = [origin] + [d.city for d in destinations]
        coords = await self._resolve_all(cities)

        breakdown = build_breakdown(origin, coords[0], destinations, coords[1:])
        total_distance = sum(segment.distance for segment in breakdown)

        fuel_analysis = analyze_fuel(total_distance, origin)

        total_packages = sum(d.packages for d in destinations)
        total_revenue = sum(d.revenue for d in destinations)
        total_cost = route_cost
        profit = total_revenue - total_cost

        result = RouteResult(
            driver=driver,
            origin=origin,
            destinations=destinations,
            total_distance=total_distance,
            total_travel_time=safe_ratio(total_distance, self.average_speed_kmh),
            total_packages=total_packages,
            total_revenue=total_revenue,
            route_cost=route_cost,
            fuel_cost=fuel_analysis.recommended.fuel_cost,
            fuel_analysis=fuel_analysis,
            total_cost=total_cost,
            profit=profit,
            profit_margin=safe_ratio(profit, total_revenue) * 100,
            distance_breakdown=tuple(breakdown),
        )
        logger.info(
            "Route %s calculated: %d km, revenue %.2f, profit %.2f (%.1f%%)",
            result.route_name,
            total_distance,
            total_revenue,
            profit,
            result.profit_margin,
        )
        return result

    # ── Geocoding ─────────────────────────────────────────────────────

    async def _resolve_all(self, cities: list[str]) -> list[Coordinate]:
        if self.parallel:
            return list(await asyncio.gather(*(self._resolve(c) for c in cities)))
        return [await self._resolve(city) for city in cities]

    async def _resolve(self, city: str) -> Coordinate:
        try:
            coords = await self.geocoder.resolve(city)
        except GeocoderUnavailable as exc:
            logger.warning("Geocoder unavailable for %r: %s", city, exc)
            raise CityResolutionError(city, f"could not be resolved ({exc})") from exc
        if coords is None:
            logger.warning("City not found: %r", city)
            raise CityNotFoundError(city)
        return coords
