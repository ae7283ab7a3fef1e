"""Smoke tests for the PDF renderers."""

from datetime import datetime, timezone

import pytest

from route_profit.domain.analytics import build_dashboard
from route_profit.domain.calculator import RouteCalculator
from route_profit.domain.entities import HistoryEntry
from route_profit.reports.pdf import (
    render_dashboard_report,
    render_history_report,
    render_route_report,
)
from tests.conftest import FakeGeocoder, make_destinations


async def _entries():
    calculator = RouteCalculator(FakeGeocoder())
    first = await calculator.calculate(
        "João Silva",
        "São Paulo, SP",
        make_destinations(("Rio de Janeiro, RJ", 25, 25.5), ("Belo Horizonte, MG", 25, 25.5)),
        400,
    )
    second = await calculator.calculate(
        "Pedro Costa", "Salvador, BA", make_destinations(("Recife, PE", 10, 20.0)), 500
    )
    date = datetime(2026, 3, 1, tzinfo=timezone.utc)
    return [HistoryEntry(id=2, date=date, result=first), HistoryEntry(id=1, date=date, result=second)]


class TestPdfReports:
    @pytest.mark.asyncio
    async def test_route_report(self):
        entries = await _entries()
        pdf = render_route_report(entries[0].result)
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    @pytest.mark.asyncio
    async def test_history_report(self):
        assert render_history_report(await _entries()).startswith(b"%PDF")

    def test_empty_history_report(self):
        assert render_history_report([]).startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_dashboard_report(self):
        summary = build_dashboard(await _entries())
        assert summary.losing_route_types
        assert render_dashboard_report(summary).startswith(b"%PDF")
