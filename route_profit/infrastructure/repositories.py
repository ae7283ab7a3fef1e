"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

``RouteHistoryRepository`` receives an ``AsyncSession`` (unit-of-work) and
speaks domain types only: ``RouteResult`` in, ``HistoryEntry`` out.

History invariants
------------------
* Newest first: entries are ordered by id, and ids are creation
  timestamps in milliseconds, bumped past the current maximum so they stay
  unique and strictly increasing even within the same millisecond.
* Bounded: after every append, everything beyond the ``limit`` newest
  entries is deleted in the same transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from route_profit.config import settings
from route_profit.domain.entities import (
    Destination,
    FuelAnalysis,
    FuelOption,
    HistoryEntry,
    RouteResult,
    Segment,
)
from route_profit.domain.enums import FuelType

from .models import RouteHistoryModel

logger = logging.getLogger(__name__)


class RouteHistoryRepository:
    def __init__(self, session: AsyncSession, limit: int | None = None):
        self.session = session
        self.limit = limit if limit is not None else settings.history_limit

    async def append(self, result: RouteResult, now: datetime | None = None) -> HistoryEntry:
        """Store *result* as the newest entry and enforce the size cap."""
        now = now or datetime.now(timezone.utc)
        entry_id = int(now.timestamp() * 1000)
        latest = await self.session.scalar(select(func.max(RouteHistoryModel.id)))
        if latest is not None and entry_id <= latest:
            entry_id = latest + 1

        model = _to_model(entry_id, now, result)
        self.session.add(model)
        await self.session.flush()
        await self._truncate()
        return HistoryEntry(id=entry_id, date=now, result=result)

    async def list(
        self,
        search: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[HistoryEntry]:
        query = _apply_search(select(RouteHistoryModel), search).order_by(
            RouteHistoryModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        rows = await self.session.execute(query)
        return [_to_entry(model) for model in rows.scalars().all()]

    async def count(self, search: str | None = None) -> int:
        query = _apply_search(
            select(func.count()).select_from(RouteHistoryModel), search
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def get(self, entry_id: int) -> Optional[HistoryEntry]:
        model = await self.session.get(RouteHistoryModel, entry_id)
        return _to_entry(model) if model is not None else None

    async def get_many(self, entry_ids: list[int]) -> list[HistoryEntry]:
        """Fetch entries keeping the order of *entry_ids*; unknown ids are skipped."""
        if not entry_ids:
            return []
        rows = await self.session.execute(
            select(RouteHistoryModel).where(RouteHistoryModel.id.in_(entry_ids))
        )
        by_id = {model.id: _to_entry(model) for model in rows.scalars().all()}
        return [by_id[i] for i in entry_ids if i in by_id]

    async def delete_by_id(self, entry_id: int) -> bool:
        result = await self.session.execute(
            delete(RouteHistoryModel).where(RouteHistoryModel.id == entry_id)
        )
        return (result.rowcount or 0) > 0

    async def clear(self) -> int:
        result = await self.session.execute(delete(RouteHistoryModel))
        removed = result.rowcount or 0
        logger.info("History cleared (%d entries removed)", removed)
        return removed

    async def _truncate(self) -> None:
        cutoff = await self.session.scalar(
            select(RouteHistoryModel.id)
            .order_by(RouteHistoryModel.id.desc())
            .offset(self.limit)
            .limit(1)
        )
        if cutoff is None:
            return
        result = await self.session.execute(
            delete(RouteHistoryModel).where(RouteHistoryModel.id <= cutoff)
        )
        logger.info("History capped at %d entries (%d dropped)", self.limit, result.rowcount or 0)


# ── Search ────────────────────────────────────────────────────────────


def _apply_search(query, search: str | None):
    term = (search or "").strip()
    if not term:
        return query
    pattern = f"%{term}%"
    return query.where(
        or_(
            RouteHistoryModel.driver.ilike(pattern),
            RouteHistoryModel.origin.ilike(pattern),
            RouteHistoryModel.destination.ilike(pattern),
        )
    )


# ── Mapping ───────────────────────────────────────────────────────────


def _option_to_dict(option: FuelOption) -> dict:
    return {
        "fuel_price": option.fuel_price,
        "consumption": option.consumption,
        "fuel_cost": option.fuel_cost,
        "cost_per_km": option.cost_per_km,
    }


def _to_model(entry_id: int, now: datetime, result: RouteResult) -> RouteHistoryModel:
    analysis = result.fuel_analysis
    return RouteHistoryModel(
        id=entry_id,
        date=now,
        driver=result.driver,
        origin=result.origin,
        destination=result.destination_label,
        total_distance=result.total_distance,
        total_travel_time=result.total_travel_time,
        total_packages=result.total_packages,
        total_revenue=result.total_revenue,
        route_cost=result.route_cost,
        fuel_cost=result.fuel_cost,
        total_cost=result.total_cost,
        profit=result.profit,
        profit_margin=result.profit_margin,
        destinations=[
            {
                "id": d.id,
                "city": d.city,
                "packages": d.packages,
                "value_per_package": d.value_per_package,
            }
            for d in result.destinations
        ],
        fuel_analysis={
            "region": analysis.region,
            "diesel": _option_to_dict(analysis.diesel),
            "gasoline": _option_to_dict(analysis.gasoline),
            "recommendation": analysis.recommendation.value,
            "savings": analysis.savings,
        },
        distance_breakdown=[
            {"from": s.from_city, "to": s.to_city, "distance": s.distance}
            for s in result.distance_breakdown
        ],
    )


def _to_entry(model: RouteHistoryModel) -> HistoryEntry:
    fuel = model.fuel_analysis
    result = RouteResult(
        driver=model.driver,
        origin=model.origin,
        destinations=tuple(Destination(**d) for d in model.destinations),
        total_distance=model.total_distance,
        total_travel_time=model.total_travel_time,
        total_packages=model.total_packages,
        total_revenue=model.total_revenue,
        route_cost=model.route_cost,
        fuel_cost=model.fuel_cost,
        fuel_analysis=FuelAnalysis(
            region=fuel["region"],
            diesel=FuelOption(**fuel["diesel"]),
            gasoline=FuelOption(**fuel["gasoline"]),
            recommendation=FuelType(fuel["recommendation"]),
            savings=fuel["savings"],
        ),
        total_cost=model.total_cost,
        profit=model.profit,
        profit_margin=model.profit_margin,
        distance_breakdown=tuple(
            Segment(from_city=s["from"], to_city=s["to"], distance=s["distance"])
            for s in model.distance_breakdown
        ),
    )
    date = model.date
    if date.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC
        date = date.replace(tzinfo=timezone.utc)
    return HistoryEntry(id=model.id, date=date, result=result)
