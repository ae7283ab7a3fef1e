"""
Route endpoints
===============

POST /api/v1/routes/calculate        -- calculate a route and store it in history (201)
POST /api/v1/routes/import           -- parse an .xlsx upload (optionally calculate every row)
GET  /api/v1/routes/import/template  -- download the fill-in spreadsheet template
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from route_profit.api.dependencies import get_calculator, get_db
from route_profit.api.middleware import RATE_LIMIT, limiter
from route_profit.api.schemas import (
    ErrorResponse,
    HistoryEntryResponse,
    ImportResponse,
    RouteCalculateRequest,
    RouteRequestResponse,
)
from route_profit.domain.calculator import RouteCalculator
from route_profit.domain.errors import RouteProfitError
from route_profit.infrastructure.locks import history_write_lock
from route_profit.infrastructure.repositories import RouteHistoryRepository
from route_profit.reports.spreadsheet import (
    XLSX_MEDIA_TYPE,
    build_template_workbook,
    parse_route_workbook,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post(
    "/calculate",
    status_code=201,
    response_model=HistoryEntryResponse,
    summary="Calculate route profitability and record it in history",
    responses={
        422: {"model": ErrorResponse, "description": "Invalid input or unknown city."},
        503: {"model": ErrorResponse, "description": "Geocoding service unavailable or history busy."},
    },
)
@limiter.limit(RATE_LIMIT)
async def calculate_route(
    request: Request,
    body: RouteCalculateRequest,
    calculator: RouteCalculator = Depends(get_calculator),
    db: AsyncSession = Depends(get_db),
):
    result = await calculator.calculate_request(body.to_domain())

    # Only successful calculations reach history
    async with history_write_lock():
        entry = await RouteHistoryRepository(db).append(result)
        await db.commit()
    return HistoryEntryResponse.model_validate(entry)


@router.post(
    "/import",
    response_model=ImportResponse,
    summary="Import routes from an Excel spreadsheet",
    responses={400: {"model": ErrorResponse, "description": "Unreadable file."}},
)
@limiter.limit(RATE_LIMIT)
async def import_routes(
    request: Request,
    file: UploadFile = File(...),
    calculate: bool = Query(False, description="Also calculate each imported route and store it in history."),
    calculator: RouteCalculator = Depends(get_calculator),
    db: AsyncSession = Depends(get_db),
):
    parsed = parse_route_workbook(await file.read())
    errors = list(parsed.errors)
    calculated: list[HistoryEntryResponse] = []

    if calculate:
        repo = RouteHistoryRepository(db)
        for position, route in enumerate(parsed.routes, start=1):
            try:
                result = await calculator.calculate_request(route)
            except RouteProfitError as exc:
                errors.append(f"Route {position} ({route.driver}): {exc}")
                continue
            async with history_write_lock():
                entry = await repo.append(result)
                await db.commit()
            calculated.append(HistoryEntryResponse.model_validate(entry))
        logger.info(
            "Imported %d routes from %s, %d calculated",
            len(parsed.routes),
            file.filename,
            len(calculated),
        )

    return ImportResponse(
        routes=[RouteRequestResponse.model_validate(r) for r in parsed.routes],
        errors=errors,
        calculated=calculated,
    )


@router.get(
    "/import/template",
    summary="Download the route spreadsheet template",
    response_class=Response,
)
@limiter.limit(RATE_LIMIT)
async def download_template(request: Request):
    return Response(
        content=build_template_workbook(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="route-template.xlsx"'},
    )
