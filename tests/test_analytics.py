"""Unit tests for the dashboard and route comparison."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from route_profit.domain.analytics import (
    build_dashboard,
    compare_routes,
    format_travel_time,
)
from route_profit.domain.calculator import RouteCalculator
from route_profit.domain.entities import HistoryEntry
from route_profit.domain.enums import (
    ProfitabilityStatus,
    SuggestionType,
    fleet_margin_status,
    profitability_status,
)
from tests.conftest import FakeGeocoder, make_destinations

DATE = datetime(2026, 3, 1, tzinfo=timezone.utc)


async def _entry(entry_id, driver, origin, city, packages, value, cost) -> HistoryEntry:
    result = await RouteCalculator(FakeGeocoder()).calculate(
        driver, origin, make_destinations((city, packages, value)), cost
    )
    return HistoryEntry(id=entry_id, date=DATE, result=result)


class TestProfitabilityStatus:
    @pytest.mark.parametrize(
        "margin,expected",
        [
            (68.6, ProfitabilityStatus.EXCELLENT),
            (30.0, ProfitabilityStatus.EXCELLENT),
            (25.0, ProfitabilityStatus.GOOD),
            (10.0, ProfitabilityStatus.FAIR),
            (9.99, ProfitabilityStatus.LOW),
            (-40.0, ProfitabilityStatus.LOW),
        ],
    )
    def test_thresholds(self, margin, expected):
        assert profitability_status(margin) is expected

    @pytest.mark.parametrize(
        "margin,expected",
        [
            (25.0, ProfitabilityStatus.EXCELLENT),
            (24.9, ProfitabilityStatus.GOOD),
            (15.0, ProfitabilityStatus.GOOD),
            (14.9, ProfitabilityStatus.FAIR),
            (-10.0, ProfitabilityStatus.FAIR),
        ],
    )
    def test_fleet_bands(self, margin, expected):
        assert fleet_margin_status(margin) is expected


class TestFormatTravelTime:
    def test_hours_and_minutes(self):
        assert format_travel_time(2.5) == "2h 30min"

    def test_minutes_only(self):
        assert format_travel_time(0.75) == "45min"

    def test_whole_hours(self):
        assert format_travel_time(3.0) == "3h"

    def test_rounding_up_to_the_next_hour(self):
        assert format_travel_time(1.999) == "2h"


class TestDashboard:
    @pytest.mark.asyncio
    async def test_empty_history(self):
        summary = build_dashboard([])
        assert summary.total_routes == 0
        assert summary.average_margin == 0
        assert summary.average_profit_per_package == 0
        assert summary.margin_status is ProfitabilityStatus.FAIR
        assert summary.route_types == []

    @pytest.mark.asyncio
    async def test_totals_and_groupings(self):
        entries = [
            await _entry(3, "João Silva", "São Paulo, SP", "Rio de Janeiro, RJ", 50, 25.5, 400),
            await _entry(2, "João Silva", "São Paulo, SP", "Rio de Janeiro, RJ", 40, 25.5, 400),
            await _entry(1, "Pedro Costa", "Salvador, BA", "Recife, PE", 10, 20.0, 500),
        ]
        summary = build_dashboard(entries)

        assert summary.total_routes == 3
        assert summary.total_revenue == pytest.approx(1275 + 1020 + 200)
        assert summary.total_profit == pytest.approx(875 + 620 - 300)
        assert summary.total_packages == 100
        assert summary.average_margin == pytest.approx(1195 / 2495 * 100)
        assert summary.average_profit_per_package == pytest.approx(11.95)
        assert summary.margin_status is ProfitabilityStatus.EXCELLENT

        top = summary.route_types[0]
        assert top.route_type == "São Paulo, SP → Rio de Janeiro, RJ"
        assert top.count == 2
        assert top.average_margin == pytest.approx((875 + 620) / (1275 + 1020) * 100)
        assert [s.route_type for s in summary.losing_route_types] == ["Salvador, BA → Recife, PE"]

        assert summary.top_by_volume[0].driver == "João Silva"
        assert summary.top_by_volume[0].total_packages == 90
        assert summary.top_by_profit[-1].driver == "Pedro Costa"


class TestCompareRoutes:
    @pytest.mark.asyncio
    async def test_single_route_has_no_suggestions(self):
        entry = await _entry(1, "A", "São Paulo, SP", "Rio de Janeiro, RJ", 50, 25.5, 400)
        comparison = compare_routes([entry])
        assert len(comparison.routes) == 1
        assert comparison.suggestions == []

    @pytest.mark.asyncio
    async def test_keeps_at_most_five_routes(self):
        entry = await _entry(1, "A", "São Paulo, SP", "Rio de Janeiro, RJ", 50, 25.5, 400)
        entries = [replace(entry, id=i) for i in range(1, 8)]
        comparison = compare_routes(entries)
        assert [r.id for r in comparison.routes] == [3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    async def test_suggestions_for_worst_route(self):
        best = await _entry(1, "A", "São Paulo, SP", "Rio de Janeiro, RJ", 50, 30.0, 300)
        worst = await _entry(2, "B", "São Paulo, SP", "Rio de Janeiro, RJ", 20, 20.0, 600)
        comparison = compare_routes([best, worst])

        assert comparison.best_by("profit").id == 1
        kinds = [s.type for s in comparison.suggestions]
        assert set(kinds) == {
            SuggestionType.PRICING,
            SuggestionType.COST,
            SuggestionType.EFFICIENCY,
            SuggestionType.VOLUME,
        }
        gains = [s.potential_gain for s in comparison.suggestions]
        assert gains == sorted(gains, reverse=True)

    @pytest.mark.asyncio
    async def test_identical_routes_have_no_suggestions(self):
        entry = await _entry(1, "A", "São Paulo, SP", "Rio de Janeiro, RJ", 50, 25.5, 400)
        comparison = compare_routes([entry, replace(entry, id=2)])
        assert comparison.suggestions == []
