"""
PDF reports (reportlab platypus).

* ``render_route_report``     -- one calculated route: summary, leg-by-leg
  distances and times, fuel comparison, then (new page) the financial
  analysis with and without fuel and the per-km / per-hour metrics.
* ``render_history_report``   -- tabular listing of history entries.
* ``render_dashboard_report`` -- dashboard totals, route types and rankings.

Every renderer returns the finished document as ``bytes``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from route_profit.domain.analytics import DashboardSummary, format_travel_time
from route_profit.domain.calculator import DEFAULT_AVERAGE_SPEED_KMH
from route_profit.domain.entities import HistoryEntry, RouteResult, safe_ratio
from route_profit.domain.enums import FuelType, profitability_status

REPORT_TITLE = "Route Profitability Analyzer - Report"
ACCENT = colors.HexColor("#FA3A2F")

_styles = getSampleStyleSheet()
_SECTION = _styles["Heading2"].clone("Section", textColor=ACCENT)
_BODY = _styles["BodyText"]


def _text(value: object) -> str:
    # The base-14 fonts have no arrow glyph
    return escape(str(value).replace("→", "->"))


def _money(value: float) -> str:
    return f"R$ {value:,.2f}"


def _header(title: str) -> list:
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    return [
        Paragraph(_text(REPORT_TITLE), _styles["Title"]),
        Paragraph(_text(title), _styles["Heading3"]),
        Paragraph(f"Generated at: {generated}", _styles["Italic"]),
        Spacer(1, 6 * mm),
    ]


def _section(title: str) -> Paragraph:
    return Paragraph(_text(title), _SECTION)


def _info_lines(lines: Sequence[tuple[str, str, bool]]) -> list:
    flowables = []
    for label, value, bold in lines:
        text = f"{_text(label)}: {_text(value)}"
        flowables.append(Paragraph(f"<b>{text}</b>" if bold else text, _BODY))
    flowables.append(Spacer(1, 4 * mm))
    return flowables


def _table(rows: list[list[str]], col_widths: Sequence[float] | None = None) -> Table:
    table = Table(
        [[Paragraph(_text(cell), _BODY) for cell in row] for row in rows],
        colWidths=col_widths,
        repeatRows=1,
    )
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#EEEEEE")),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    return table


def _build(story: list, pagesize=A4) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title=REPORT_TITLE,
    )
    doc.build(story)
    return buffer.getvalue()


# ── Route report ──────────────────────────────────────────────────────


def render_route_report(result: RouteResult, title: str | None = None) -> bytes:
    story = _header(title or f"Route {result.route_name}")

    story.append(_section("Route Summary"))
    story += _info_lines(
        [
            ("Driver", result.driver or "N/A", True),
            ("Origin", result.origin, False),
            ("Destinations", result.destination_label, False),
            ("Total distance", f"{result.total_distance} km", False),
            ("Estimated time", f"{result.total_travel_time:.1f} hours", False),
            ("Total packages", str(result.total_packages), False),
        ]
    )

    story.append(_section("Distance and Time Breakdown"))
    speed = safe_ratio(result.total_distance, result.total_travel_time) or DEFAULT_AVERAGE_SPEED_KMH
    legs = [
        (
            f"{segment.from_city} → {segment.to_city}",
            f"{segment.distance} km ({format_travel_time(segment.distance / speed)})",
            False,
        )
        for segment in result.distance_breakdown
    ] or [("No distance breakdown available", "-", False)]
    story += _info_lines(
        legs
        + [
            ("Average speed considered", f"{speed:g} km/h", False),
            ("Total estimated travel time", format_travel_time(result.total_travel_time), False),
        ]
    )

    fuel = result.fuel_analysis
    story.append(_section(f"Fuel Comparison - {fuel.region}"))
    story += _info_lines(
        [
            ("Recommendation", "Diesel" if fuel.recommendation is FuelType.DIESEL else "Gasoline", True),
            ("Estimated savings", _money(fuel.savings), True),
            ("Diesel price/liter", _money(fuel.diesel.fuel_price), False),
            ("Diesel total cost", _money(fuel.diesel.fuel_cost), False),
            ("Gasoline price/liter", _money(fuel.gasoline.fuel_price), False),
            ("Gasoline total cost", _money(fuel.gasoline.fuel_cost), False),
        ]
    )

    story.append(PageBreak())
    story.append(_section("Financial Analysis"))
    story += _info_lines(
        [
            ("Total revenue", _money(result.total_revenue), True),
            ("Other costs", _money(result.route_cost), False),
            ("Fuel cost (estimated)", _money(result.fuel_cost), False),
            ("Net profit (without fuel)", _money(result.profit), True),
            ("Profit margin (without fuel)", f"{result.profit_margin:.1f}%", True),
            ("Net profit (with fuel)", _money(result.net_profit_with_fuel), False),
            ("Profit margin (with fuel)", f"{result.margin_with_fuel:.1f}%", False),
            ("Status", profitability_status(result.profit_margin).value, False),
        ]
    )

    story.append(_section("Performance Metrics"))
    story += _info_lines(
        [
            ("Revenue per km", _money(result.revenue_per_km), False),
            ("Operational cost per km", _money(result.cost_per_km), False),
            ("Profit per hour", _money(result.profit_per_hour), False),
            ("Revenue per hour", _money(result.revenue_per_hour), False),
            ("Packages per hour", f"{result.packages_per_hour:.1f}", False),
            ("Operational efficiency", f"{result.operational_efficiency:.2f}x", False),
        ]
    )
    return _build(story)


# ── History report ────────────────────────────────────────────────────


def render_history_report(entries: Sequence[HistoryEntry]) -> bytes:
    story = _header(f"Route History ({len(entries)} routes)")
    if not entries:
        story.append(Paragraph("No routes in history.", _BODY))
        return _build(story, pagesize=landscape(A4))

    rows = [["Date", "Driver", "Route", "Distance", "Packages", "Revenue", "Costs", "Profit", "Margin"]]
    for entry in entries:
        r = entry.result
        rows.append(
            [
                entry.date.strftime("%Y-%m-%d %H:%M"),
                r.driver,
                r.route_name,
                f"{r.total_distance} km",
                str(r.total_packages),
                _money(r.total_revenue),
                _money(r.route_cost),
                _money(r.profit),
                f"{r.profit_margin:.1f}%",
            ]
        )
    widths = [28 * mm, 30 * mm, 75 * mm, 20 * mm, 18 * mm, 25 * mm, 23 * mm, 23 * mm, 15 * mm]
    story.append(_table(rows, widths))

    revenue = sum(e.result.total_revenue for e in entries)
    profit = sum(e.result.profit for e in entries)
    story.append(Spacer(1, 4 * mm))
    story += _info_lines(
        [
            ("Total revenue", _money(revenue), True),
            ("Total profit", _money(profit), True),
            ("Average margin", f"{safe_ratio(profit, revenue) * 100:.1f}%", False),
        ]
    )
    return _build(story, pagesize=landscape(A4))


# ── Dashboard report ──────────────────────────────────────────────────


def render_dashboard_report(summary: DashboardSummary) -> bytes:
    story = _header("Profitability Dashboard")

    story.append(_section("Overview"))
    story += _info_lines(
        [
            ("Total routes", str(summary.total_routes), True),
            ("Total revenue", _money(summary.total_revenue), False),
            ("Total profit", _money(summary.total_profit), False),
            ("Average margin", f"{summary.average_margin:.1f}% ({summary.margin_status.value})", True),
            ("Total packages", str(summary.total_packages), False),
            ("Average profit per package", _money(summary.average_profit_per_package), False),
        ]
    )

    if summary.route_types:
        story.append(_section("Route Types"))
        rows = [["Route", "Runs", "Revenue", "Profit", "Avg. margin", "Avg. distance"]]
        rows += [
            [
                s.route_type,
                str(s.count),
                _money(s.total_revenue),
                _money(s.total_profit),
                f"{s.average_margin:.1f}%",
                f"{s.average_distance:.0f} km",
            ]
            for s in summary.route_types
        ]
        story.append(_table(rows))
        story.append(Spacer(1, 4 * mm))

    if summary.losing_route_types:
        story.append(_section("Routes Operating at a Loss"))
        story += _info_lines(
            [(s.route_type, _money(s.total_profit), False) for s in summary.losing_route_types]
        )

    for heading, ranking in (
        ("Top Routes by Volume", summary.top_by_volume),
        ("Top Routes by Profit", summary.top_by_profit),
    ):
        if not ranking:
            continue
        story.append(_section(heading))
        rows = [["Driver", "Route", "Packages", "Revenue", "Profit", "Margin"]]
        rows += [
            [
                r.driver,
                r.route_name,
                str(r.total_packages),
                _money(r.total_revenue),
                _money(r.total_profit),
                f"{r.profit_margin:.1f}%",
            ]
            for r in ranking
        ]
        story.append(_table(rows))
        story.append(Spacer(1, 4 * mm))

    return _build(story)
