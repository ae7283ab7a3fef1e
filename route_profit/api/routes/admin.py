"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- health check (also touches the history store)
"""

from fastapi import APIRouter, Depends

from route_profit.api.dependencies import get_history
from route_profit.api.schemas import HealthResponse
from route_profit.infrastructure.repositories import RouteHistoryRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(history: RouteHistoryRepository = Depends(get_history)):
    return HealthResponse(history_entries=await history.count())
