"""
History analytics: profitability dashboard and side-by-side comparison.

Both views are plain reductions over the (bounded) history list, so they
are recomputed on every request instead of being stored.

Dashboard
---------
* Route types are grouped by route name (``origin → d1 → d2``) and sorted
  by how often they were run.
* Rankings group by driver *and* route name, top 5 by volume / profit.
* The overall margin is banded excellent / good / fair at 25 % and 15 %,
  looser than the per-route bands.

Comparison
----------
Up to 5 routes.  With at least two routes whose best and worst performer
(by profit) differ, the worst one receives up to 4 improvement suggestions
benchmarked against the best one, highest potential gain first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .entities import HistoryEntry, safe_ratio
from .enums import Difficulty, ProfitabilityStatus, SuggestionType, fleet_margin_status

TOP_RANKING_SIZE = 5
MAX_COMPARED_ROUTES = 5
MAX_SUGGESTIONS = 4


# ── Dashboard ─────────────────────────────────────────────────────────


@dataclass
class RouteTypeStats:
    route_type: str
    count: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0
    total_cost: float = 0.0
    total_distance: int = 0

    @property
    def average_margin(self) -> float:
        return safe_ratio(self.total_profit, self.total_revenue) * 100

    @property
    def average_distance(self) -> float:
        return safe_ratio(self.total_distance, self.count)


@dataclass
class DriverRouteRanking:
    driver: str
    route_name: str
    total_packages: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0

    @property
    def profit_margin(self) -> float:
        return safe_ratio(self.total_profit, self.total_revenue) * 100


@dataclass
class DashboardSummary:
    total_routes: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0
    total_packages: int = 0
    route_types: list[RouteTypeStats] = field(default_factory=list)
    losing_route_types: list[RouteTypeStats] = field(default_factory=list)
    top_by_volume: list[DriverRouteRanking] = field(default_factory=list)
    top_by_profit: list[DriverRouteRanking] = field(default_factory=list)

    @property
    def average_margin(self) -> float:
        return safe_ratio(self.total_profit, self.total_revenue) * 100

    @property
    def average_profit_per_package(self) -> float:
        return safe_ratio(self.total_profit, self.total_packages)

    @property
    def margin_status(self) -> ProfitabilityStatus:
        return fleet_margin_status(self.average_margin)


def build_dashboard(entries: Sequence[HistoryEntry]) -> DashboardSummary:
    summary = DashboardSummary(total_routes=len(entries))
    route_types: dict[str, RouteTypeStats] = {}
    rankings: dict[tuple[str, str], DriverRouteRanking] = {}

    for entry in entries:
        result = entry.result
        summary.total_revenue += result.total_revenue
        summary.total_profit += result.profit
        summary.total_packages += result.total_packages

        name = result.route_name
        stats = route_types.setdefault(name, RouteTypeStats(route_type=name))
        stats.count += 1
        stats.total_revenue += result.total_revenue
        stats.total_profit += result.profit
        stats.total_cost += result.route_cost
        stats.total_distance += result.total_distance

        ranking = rankings.setdefault(
            (result.driver, name),
            DriverRouteRanking(driver=result.driver, route_name=name),
        )
        ranking.total_packages += result.total_packages
        ranking.total_revenue += result.total_revenue
        ranking.total_profit += result.profit

    # sorted() is stable: equal counts keep first-seen (newest) order
    summary.route_types = sorted(route_types.values(), key=lambda s: -s.count)
    summary.losing_route_types = [s for s in summary.route_types if s.total_profit < 0]

    aggregated = list(rankings.values())
    summary.top_by_volume = sorted(aggregated, key=lambda r: -r.total_packages)[:TOP_RANKING_SIZE]
    summary.top_by_profit = sorted(aggregated, key=lambda r: -r.total_profit)[:TOP_RANKING_SIZE]
    return summary


# ── Comparison ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ComparedRoute:
    id: int
    name: str
    driver: str
    profit: float
    margin: float
    revenue: float
    distance: int
    efficiency: float  # revenue per km
    profit_per_hour: float
    cost: float
    packages: int
    value_per_package: float
    cost_per_km: float
    revenue_per_package: float

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "ComparedRoute":
        r = entry.result
        return cls(
            id=entry.id,
            name=r.route_name,
            driver=r.driver,
            profit=r.profit,
            margin=r.profit_margin,
            revenue=r.total_revenue,
            distance=r.total_distance,
            efficiency=r.revenue_per_km,
            profit_per_hour=r.profit_per_hour,
            cost=r.route_cost,
            packages=r.total_packages,
            value_per_package=r.value_per_package,
            cost_per_km=r.cost_per_km,
            revenue_per_package=r.value_per_package,
        )


@dataclass(frozen=True)
class ImprovementSuggestion:
    type: SuggestionType
    title: str
    description: str
    impact: str
    difficulty: Difficulty
    potential_gain: float


@dataclass
class Comparison:
    routes: list[ComparedRoute] = field(default_factory=list)
    suggestions: list[ImprovementSuggestion] = field(default_factory=list)

    def best_by(self, metric: str) -> ComparedRoute | None:
        if not self.routes:
            return None
        return max(self.routes, key=lambda route: getattr(route, metric))


def compare_routes(entries: Sequence[HistoryEntry]) -> Comparison:
    """Compare the most recently selected routes (at most five)."""
    routes = [ComparedRoute.from_entry(e) for e in list(entries)[-MAX_COMPARED_ROUTES:]]
    comparison = Comparison(routes=routes)
    if len(routes) >= 2:
        comparison.suggestions = improvement_suggestions(routes)
    return comparison


def improvement_suggestions(routes: Sequence[ComparedRoute]) -> list[ImprovementSuggestion]:
    # First maximum / minimum wins ties, matching a left-to-right scan
    best = max(routes, key=lambda r: r.profit)
    worst = min(routes, key=lambda r: r.profit)
    if best is worst:
        return []

    suggestions: list[ImprovementSuggestion] = []

    if best.value_per_package > worst.value_per_package:
        diff = best.value_per_package - worst.value_per_package
        gain = diff * worst.packages
        suggestions.append(
            ImprovementSuggestion(
                type=SuggestionType.PRICING,
                title="Adjust price per package",
                description=(
                    f"Raise the value per package from R$ {worst.value_per_package:.2f} "
                    f"to R$ {best.value_per_package:.2f} (difference of R$ {diff:.2f})"
                ),
                impact=f"Potential revenue increase of R$ {gain:.2f}",
                difficulty=Difficulty.EASY,
                potential_gain=gain,
            )
        )

    if worst.cost_per_km > best.cost_per_km:
        diff = worst.cost_per_km - best.cost_per_km
        gain = diff * worst.distance
        suggestions.append(
            ImprovementSuggestion(
                type=SuggestionType.COST,
                title="Optimise operational costs",
                description=(
                    f"Reduce cost per km from R$ {worst.cost_per_km:.2f} "
                    f"to R$ {best.cost_per_km:.2f} (saving R$ {diff:.2f}/km)"
                ),
                impact=f"Potential cost saving of R$ {gain:.2f}",
                difficulty=Difficulty.MEDIUM,
                potential_gain=gain,
            )
        )

    if best.efficiency > worst.efficiency:
        diff = best.efficiency - worst.efficiency
        gain = diff * worst.distance
        suggestions.append(
            ImprovementSuggestion(
                type=SuggestionType.EFFICIENCY,
                title="Improve route efficiency",
                description=(
                    f"Raise revenue per km from R$ {worst.efficiency:.2f} "
                    f"to R$ {best.efficiency:.2f}"
                ),
                impact=f"Potential revenue increase of R$ {gain:.2f}",
                difficulty=Difficulty.MEDIUM,
                potential_gain=gain,
            )
        )

    if best.packages > worst.packages:
        diff = best.packages - worst.packages
        gain = diff * worst.value_per_package
        suggestions.append(
            ImprovementSuggestion(
                type=SuggestionType.VOLUME,
                title="Increase package volume",
                description=(
                    f"Grow from {worst.packages} to {best.packages} packages "
                    f"(difference of {diff} packages)"
                ),
                impact=f"Potential revenue increase of R$ {gain:.2f}",
                difficulty=Difficulty.HARD,
                potential_gain=gain,
            )
        )

    suggestions.sort(key=lambda s: -s.potential_gain)
    return suggestions[:MAX_SUGGESTIONS]


def format_travel_time(hours: float) -> str:
    """Render a duration in hours as ``"2h 30min"`` / ``"45min"`` / ``"3h"``."""
    whole_hours = int(hours)
    minutes = round((hours - whole_hours) * 60)
    if minutes == 60:
        whole_hours, minutes = whole_hours + 1, 0
    if whole_hours == 0:
        return f"{minutes}min"
    if minutes == 0:
        return f"{whole_hours}h"
    return f"{whole_hours}h {minutes}min"
