"""
Distance calculation using the Haversine formula.

Assumption
----------
Route legs are measured as great-circle distance between the geocoded
city centres, not driving distance over a road network.  Each leg is
rounded to whole kilometres so that the breakdown of a route always sums
exactly to its total.

Complexity: O(1) per call.
"""

import math

from .entities import Coordinate

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_km(a: Coordinate, b: Coordinate) -> int:
    """Leg distance between two coordinates, rounded to the nearest km."""
    # half-up, not banker's rounding
    return math.floor(haversine_km(a.lat, a.lng, b.lat, b.lng) + 0.5)
