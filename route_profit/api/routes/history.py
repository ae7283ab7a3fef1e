"""
History endpoints
=================

GET    /api/v1/history                      -- newest first, optional search + paging
GET    /api/v1/history/export.xlsx          -- whole (filtered) history as a spreadsheet
GET    /api/v1/history/report.pdf           -- whole (filtered) history as a PDF table
GET    /api/v1/history/{entry_id}           -- one entry
GET    /api/v1/history/{entry_id}/report.pdf -- detailed PDF report of one route
DELETE /api/v1/history/{entry_id}           -- remove one entry (404 if missing)
DELETE /api/v1/history                      -- remove everything
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from route_profit.api.dependencies import get_history
from route_profit.api.middleware import RATE_LIMIT, limiter
from route_profit.api.schemas import (
    ClearHistoryResponse,
    HistoryEntryResponse,
    HistoryPageResponse,
)
from route_profit.infrastructure.locks import history_write_lock
from route_profit.infrastructure.repositories import RouteHistoryRepository
from route_profit.reports.pdf import render_history_report, render_route_report
from route_profit.reports.spreadsheet import XLSX_MEDIA_TYPE, export_history_workbook

router = APIRouter(prefix="/history", tags=["history"])

PAGE_SIZE = 15


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=HistoryPageResponse, summary="List calculated routes")
@limiter.limit(RATE_LIMIT)
async def list_history(
    request: Request,
    search: Optional[str] = Query(None, max_length=120, description="Matches driver, origin or destination."),
    limit: int = Query(PAGE_SIZE, ge=1, le=500),
    offset: int = Query(0, ge=0),
    history: RouteHistoryRepository = Depends(get_history),
):
    entries = await history.list(search=search, limit=limit, offset=offset)
    return HistoryPageResponse(
        items=[HistoryEntryResponse.model_validate(e) for e in entries],
        total=await history.count(search=search),
        limit=limit,
        offset=offset,
    )


@router.get("/export.xlsx", response_class=Response, summary="Export history as a spreadsheet")
@limiter.limit(RATE_LIMIT)
async def export_history(
    request: Request,
    search: Optional[str] = Query(None, max_length=120),
    history: RouteHistoryRepository = Depends(get_history),
):
    entries = await history.list(search=search)
    return _attachment(export_history_workbook(entries), XLSX_MEDIA_TYPE, "route-history.xlsx")


@router.get("/report.pdf", response_class=Response, summary="History report as PDF")
@limiter.limit(RATE_LIMIT)
async def history_report(
    request: Request,
    search: Optional[str] = Query(None, max_length=120),
    history: RouteHistoryRepository = Depends(get_history),
):
    entries = await history.list(search=search)
    return _attachment(render_history_report(entries), "application/pdf", "route-history.pdf")


@router.get("/{entry_id}", response_model=HistoryEntryResponse, summary="Get one history entry")
@limiter.limit(RATE_LIMIT)
async def get_entry(
    request: Request,
    entry_id: int,
    history: RouteHistoryRepository = Depends(get_history),
):
    entry = await history.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return HistoryEntryResponse.model_validate(entry)


@router.get("/{entry_id}/report.pdf", response_class=Response, summary="Route report as PDF")
@limiter.limit(RATE_LIMIT)
async def entry_report(
    request: Request,
    entry_id: int,
    history: RouteHistoryRepository = Depends(get_history),
):
    entry = await history.get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return _attachment(
        render_route_report(entry.result), "application/pdf", f"route-{entry_id}.pdf"
    )


@router.delete("/{entry_id}", status_code=204, summary="Delete one history entry")
@limiter.limit(RATE_LIMIT)
async def delete_entry(
    request: Request,
    entry_id: int,
    history: RouteHistoryRepository = Depends(get_history),
):
    async with history_write_lock():
        removed = await history.delete_by_id(entry_id)
        if not removed:
            raise HTTPException(status_code=404, detail="History entry not found")
        await history.session.commit()
    return Response(status_code=204)


@router.delete("", response_model=ClearHistoryResponse, summary="Clear the whole history")
@limiter.limit(RATE_LIMIT)
async def clear_history(
    request: Request,
    history: RouteHistoryRepository = Depends(get_history),
):
    async with history_write_lock():
        removed = await history.clear()
        await history.session.commit()
    return ClearHistoryResponse(removed=removed)
