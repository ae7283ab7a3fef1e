"""Unit tests for great-circle distances."""

import math

import pytest

from route_profit.domain.distance import EARTH_RADIUS_KM, distance_km, haversine_km
from route_profit.domain.entities import Coordinate
from tests.conftest import CITY_COORDINATES

SAO_PAULO = CITY_COORDINATES["São Paulo, SP"]
RIO = CITY_COORDINATES["Rio de Janeiro, RJ"]


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(-23.55, -46.63, -23.55, -46.63) == 0.0

    def test_one_degree_of_latitude(self):
        # 1° along a meridian = R * π / 180
        expected = EARTH_RADIUS_KM * math.pi / 180
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(expected)

    def test_antipodes_are_half_the_circumference(self):
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)


class TestDistanceKm:
    def test_symmetric(self):
        assert distance_km(SAO_PAULO, RIO) == distance_km(RIO, SAO_PAULO)

    def test_distance_to_self_is_zero(self):
        assert distance_km(SAO_PAULO, SAO_PAULO) == 0

    def test_returns_whole_kilometres(self):
        assert isinstance(distance_km(SAO_PAULO, RIO), int)

    def test_sao_paulo_to_rio(self):
        # Straight-line distance is roughly 357-360 km depending on the city centroid
        assert 355 <= distance_km(SAO_PAULO, RIO) <= 362

    def test_rounds_half_up(self):
        # Half a degree of latitude ≈ 55.6 km -> 56
        half_degree = Coordinate(0.5, 0.0)
        assert distance_km(Coordinate(0.0, 0.0), half_degree) == 56
