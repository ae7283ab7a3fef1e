"""
Analytics endpoints
===================

GET /api/v1/analytics/dashboard            -- profitability dashboard over the whole history
GET /api/v1/analytics/dashboard/report.pdf -- the same dashboard as a PDF
GET /api/v1/analytics/compare?ids=..       -- side-by-side comparison of 2-5 routes
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from route_profit.api.dependencies import get_history
from route_profit.api.middleware import RATE_LIMIT, limiter
from route_profit.api.schemas import (
    ComparedRouteResponse,
    ComparisonResponse,
    DashboardResponse,
    ImprovementSuggestionResponse,
)
from route_profit.domain.analytics import MAX_COMPARED_ROUTES, build_dashboard, compare_routes
from route_profit.infrastructure.repositories import RouteHistoryRepository
from route_profit.reports.pdf import render_dashboard_report

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse, summary="Profitability dashboard")
@limiter.limit(RATE_LIMIT)
async def dashboard(
    request: Request,
    history: RouteHistoryRepository = Depends(get_history),
):
    summary = build_dashboard(await history.list())
    return DashboardResponse.model_validate(summary)


@router.get("/dashboard/report.pdf", response_class=Response, summary="Dashboard report as PDF")
@limiter.limit(RATE_LIMIT)
async def dashboard_report(
    request: Request,
    history: RouteHistoryRepository = Depends(get_history),
):
    summary = build_dashboard(await history.list())
    return Response(
        content=render_dashboard_report(summary),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="dashboard.pdf"'},
    )


@router.get("/compare", response_model=ComparisonResponse, summary="Compare routes side by side")
@limiter.limit(RATE_LIMIT)
async def compare(
    request: Request,
    ids: list[int] = Query(..., description="History entry ids, 2 to 5."),
    history: RouteHistoryRepository = Depends(get_history),
):
    ids = list(dict.fromkeys(ids))
    if not 2 <= len(ids) <= MAX_COMPARED_ROUTES:
        raise HTTPException(
            status_code=422,
            detail=f"Select between 2 and {MAX_COMPARED_ROUTES} distinct routes to compare",
        )

    entries = await history.get_many(ids)
    missing = sorted(set(ids) - {e.id for e in entries})
    if missing:
        raise HTTPException(status_code=404, detail=f"History entries not found: {missing}")

    comparison = compare_routes(entries)
    best_profit = comparison.best_by("profit")
    best_margin = comparison.best_by("margin")
    best_efficiency = comparison.best_by("efficiency")
    return ComparisonResponse(
        routes=[ComparedRouteResponse.model_validate(r) for r in comparison.routes],
        suggestions=[
            ImprovementSuggestionResponse.model_validate(s) for s in comparison.suggestions
        ],
        best_profit_id=best_profit.id if best_profit else None,
        best_margin_id=best_margin.id if best_margin else None,
        best_efficiency_id=best_efficiency.id if best_efficiency else None,
    )
