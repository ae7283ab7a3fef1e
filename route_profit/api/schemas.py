"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from route_profit.domain.entities import Destination, RouteRequest
from route_profit.domain.enums import (
    Difficulty,
    FuelType,
    ProfitabilityStatus,
    SuggestionType,
)


# ── Requests ──────────────────────────────────────────────────────────


class DestinationIn(BaseModel):
    id: Optional[str] = Field(None, max_length=64)
    city: str = Field(..., max_length=255)
    packages: int = 0
    value_per_package: float = 0.0


class RouteCalculateRequest(BaseModel):
    driver: str = Field("", max_length=120)
    origin: str = Field(..., max_length=255)
    destinations: list[DestinationIn] = Field(default_factory=list, max_length=20)
    route_cost: float = Field(0.0, description="Operational (non-fuel) costs of the route.")

    def to_domain(self) -> RouteRequest:
        return RouteRequest(
            driver=self.driver.strip(),
            origin=self.origin.strip(),
            destinations=tuple(
                Destination(
                    id=d.id or str(position),
                    city=d.city.strip(),
                    packages=d.packages,
                    value_per_package=d.value_per_package,
                )
                for position, d in enumerate(self.destinations, start=1)
            ),
            route_cost=self.route_cost,
        )


# ── Responses ─────────────────────────────────────────────────────────


class DestinationResponse(BaseModel):
    id: str
    city: str
    packages: int
    value_per_package: float
    revenue: float

    model_config = {"from_attributes": True}


class SegmentResponse(BaseModel):
    from_city: str
    to_city: str
    distance: int

    model_config = {"from_attributes": True}


class FuelOptionResponse(BaseModel):
    fuel_price: float
    consumption: float
    fuel_cost: float
    cost_per_km: float

    model_config = {"from_attributes": True}


class FuelAnalysisResponse(BaseModel):
    region: str
    diesel: FuelOptionResponse
    gasoline: FuelOptionResponse
    recommendation: FuelType
    savings: float

    model_config = {"from_attributes": True}


class RouteResultResponse(BaseModel):
    driver: str
    origin: str
    route_name: str
    destinations: list[DestinationResponse]
    distance_breakdown: list[SegmentResponse]
    total_distance: int
    total_travel_time: float
    total_packages: int
    total_revenue: float
    route_cost: float
    fuel_cost: float
    fuel_analysis: FuelAnalysisResponse
    total_cost: float
    profit: float
    profit_margin: float
    status: ProfitabilityStatus

    # derived metrics
    value_per_package: float
    net_profit_with_fuel: float
    margin_with_fuel: float
    revenue_per_km: float
    cost_per_km: float
    profit_per_hour: float
    revenue_per_hour: float
    packages_per_hour: float
    operational_efficiency: float

    model_config = {"from_attributes": True}


class HistoryEntryResponse(BaseModel):
    id: int
    date: datetime
    result: RouteResultResponse

    model_config = {"from_attributes": True}


class HistoryPageResponse(BaseModel):
    items: list[HistoryEntryResponse]
    total: int
    limit: int
    offset: int


class ClearHistoryResponse(BaseModel):
    removed: int


class RouteRequestResponse(BaseModel):
    driver: str
    origin: str
    destinations: list[DestinationResponse]
    route_cost: float

    model_config = {"from_attributes": True}


class ImportResponse(BaseModel):
    routes: list[RouteRequestResponse]
    errors: list[str]
    calculated: list[HistoryEntryResponse] = []


class RouteTypeStatsResponse(BaseModel):
    route_type: str
    count: int
    total_revenue: float
    total_profit: float
    total_cost: float
    total_distance: int
    average_margin: float
    average_distance: float

    model_config = {"from_attributes": True}


class DriverRouteRankingResponse(BaseModel):
    driver: str
    route_name: str
    total_packages: int
    total_revenue: float
    total_profit: float
    profit_margin: float

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    total_routes: int
    total_revenue: float
    total_profit: float
    total_packages: int
    average_margin: float
    margin_status: ProfitabilityStatus
    average_profit_per_package: float
    route_types: list[RouteTypeStatsResponse]
    losing_route_types: list[RouteTypeStatsResponse]
    top_by_volume: list[DriverRouteRankingResponse]
    top_by_profit: list[DriverRouteRankingResponse]

    model_config = {"from_attributes": True}


class ComparedRouteResponse(BaseModel):
    id: int
    name: str
    driver: str
    profit: float
    margin: float
    revenue: float
    distance: int
    efficiency: float
    profit_per_hour: float
    cost: float
    packages: int
    value_per_package: float
    cost_per_km: float
    revenue_per_package: float

    model_config = {"from_attributes": True}


class ImprovementSuggestionResponse(BaseModel):
    type: SuggestionType
    title: str
    description: str
    impact: str
    difficulty: Difficulty
    potential_gain: float

    model_config = {"from_attributes": True}


class ComparisonResponse(BaseModel):
    routes: list[ComparedRouteResponse]
    suggestions: list[ImprovementSuggestionResponse]
    best_profit_id: Optional[int] = None
    best_margin_id: Optional[int] = None
    best_efficiency_id: Optional[int] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    history_entries: int = 0


class ErrorResponse(BaseModel):
    detail: str
    city: Optional[str] = None
    errors: list[str] = []
