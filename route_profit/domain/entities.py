"""
Domain entities for route profitability.

All records are frozen dataclasses: a ``RouteResult`` is produced once by
the calculator and never mutated afterwards; history keeps a snapshot of
the destinations exactly as they were when the route was calculated.

Derived per-unit metrics (revenue per km, profit per hour, ...) are
read-only properties and fall back to ``0.0`` whenever their divisor is
zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .enums import FuelType, ProfitabilityStatus, profitability_status


def safe_ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Destination:
    id: str
    city: str
    packages: int = 0
    value_per_package: float = 0.0

    @property
    def revenue(self) -> float:
        return self.packages * self.value_per_package


@dataclass(frozen=True)
class Segment:
    from_city: str
    to_city: str
    distance: int


@dataclass(frozen=True)
class FuelOption:
    fuel_price: float  # per liter
    consumption: float  # liters needed for the whole route
    fuel_cost: float
    cost_per_km: float


@dataclass(frozen=True)
class FuelAnalysis:
    region: str
    diesel: FuelOption
    gasoline: FuelOption
    recommendation: FuelType
    savings: float

    @property
    def recommended(self) -> FuelOption:
        if self.recommendation is FuelType.DIESEL:
            return self.diesel
        return self.gasoline


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RouteRequest:
    """Input of one route calculation (manual entry or a spreadsheet row)."""

    driver: str
    origin: str
    destinations: tuple[Destination, ...]
    route_cost: float = 0.0


@dataclass(frozen=True)
class RouteResult:
    driver: str
    origin: str
    destinations: tuple[Destination, ...]
    total_distance: int
    total_travel_time: float  # hours
    total_packages: int
    total_revenue: float
    route_cost: float  # operational, non-fuel costs
    fuel_cost: float  # informational, excluded from profit
    fuel_analysis: FuelAnalysis
    total_cost: float
    profit: float
    profit_margin: float  # percent of revenue
    distance_breakdown: tuple[Segment, ...] = field(default_factory=tuple)

    @property
    def route_name(self) -> str:
        return " → ".join([self.origin, *(d.city for d in self.destinations)])

    @property
    def destination_label(self) -> str:
        return " → ".join(d.city for d in self.destinations)

    @property
    def value_per_package(self) -> float:
        return safe_ratio(self.total_revenue, self.total_packages)

    @property
    def net_profit_with_fuel(self) -> float:
        return self.total_revenue - self.route_cost - self.fuel_cost

    @property
    def margin_with_fuel(self) -> float:
        return safe_ratio(self.net_profit_with_fuel, self.total_revenue) * 100

    @property
    def revenue_per_km(self) -> float:
        return safe_ratio(self.total_revenue, self.total_distance)

    @property
    def cost_per_km(self) -> float:
        return safe_ratio(self.route_cost, self.total_distance)

    @property
    def profit_per_hour(self) -> float:
        return safe_ratio(self.profit, self.total_travel_time)

    @property
    def revenue_per_hour(self) -> float:
        return safe_ratio(self.total_revenue, self.total_travel_time)

    @property
    def packages_per_hour(self) -> float:
        return safe_ratio(self.total_packages, self.total_travel_time)

    @property
    def operational_efficiency(self) -> float:
        """Revenue earned per unit of operational cost."""
        return safe_ratio(self.total_revenue, self.route_cost)

    @property
    def status(self) -> ProfitabilityStatus:
        return profitability_status(self.profit_margin)


@dataclass(frozen=True)
class HistoryEntry:
    id: int  # creation timestamp (ms), unique
    date: datetime
    result: RouteResult
