"""
Fuel Analysis Engine
====================

Formula (per fuel type)
-----------------------
liters      = distance_km / km_per_liter
fuel_cost   = liters x price_per_liter(state of origin)
cost_per_km = fuel_cost / distance_km          (0 for a zero-length route)

* Diesel vehicles run 8 km/L, gasoline vehicles 6 km/L.
* The recommendation is the cheaper fuel; a tie goes to diesel.
* ``savings`` is the absolute difference between the two fuel costs.

Prices come from the origin city's state, since that is where the vehicle
fills up.  Complexity: O(1) per analysis (plus the city table scan).
"""

from __future__ import annotations

from types import MappingProxyType

from .entities import FuelAnalysis, FuelOption, safe_ratio
from .enums import FuelType
from .regions import price_for, state_for

KM_PER_LITER = MappingProxyType({FuelType.DIESEL: 8.0, FuelType.GASOLINE: 6.0})


def fuel_option(distance_km: float, price_per_liter: float, km_per_liter: float) -> FuelOption:
    liters = distance_km / km_per_liter
    cost = liters * price_per_liter
    return FuelOption(
        fuel_price=price_per_liter,
        consumption=liters,
        fuel_cost=cost,
        cost_per_km=safe_ratio(cost, distance_km),
    )


def analyze_fuel(total_distance_km: float, origin_city: str) -> FuelAnalysis:
    """Compare diesel and gasoline for a route starting at *origin_city*."""
    state = state_for(origin_city)
    diesel = fuel_option(
        total_distance_km,
        price_for(state, FuelType.DIESEL),
        KM_PER_LITER[FuelType.DIESEL],
    )
    gasoline = fuel_option(
        total_distance_km,
        price_for(state, FuelType.GASOLINE),
        KM_PER_LITER[FuelType.GASOLINE],
    )

    recommendation = (
        FuelType.DIESEL if diesel.fuel_cost <= gasoline.fuel_cost else FuelType.GASOLINE
    )
    return FuelAnalysis(
        region=state,
        diesel=diesel,
        gasoline=gasoline,
        recommendation=recommendation,
        savings=abs(diesel.fuel_cost - gasoline.fuel_cost),
    )
