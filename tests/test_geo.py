"""Tests for the haversine geo-fence checker."""

import pytest

from music_room.domain.resources.value_objects import GeoFence
from music_room.infrastructure.geo.haversine import HaversineGeoFenceChecker, distance_m


class TestDistance:
    def test_same_point_is_zero(self):
        assert distance_m(48.8566, 2.3522, 48.8566, 2.3522) == 0

    def test_one_degree_of_latitude(self):
        assert distance_m(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)

    def test_symmetric(self):
        there = distance_m(48.8566, 2.3522, 51.5074, -0.1278)
        back = distance_m(51.5074, -0.1278, 48.8566, 2.3522)

        assert there == pytest.approx(back)
        assert there == pytest.approx(343_500, rel=1e-2)


class TestHaversineGeoFenceChecker:
    @pytest.fixture
    def checker(self):
        return HaversineGeoFenceChecker()

    def test_centre_is_inside(self, checker):
        fence = GeoFence(latitude=10, longitude=10, radius_m=1)

        assert checker.is_inside(fence, 10, 10)

    def test_outside_radius(self, checker):
        fence = GeoFence(latitude=0, longitude=0, radius_m=100)

        # 0.001 degrees of latitude is about 111 metres.
        assert not checker.is_inside(fence, 0.001, 0)

    def test_inside_radius(self, checker):
        fence = GeoFence(latitude=0, longitude=0, radius_m=200)

        assert checker.is_inside(fence, 0.001, 0)

    def test_near_boundary(self, checker):
        edge_lat = 1000 / 111_194.93

        assert distance_m(0, 0, edge_lat, 0) == pytest.approx(1000, abs=0.5)
        assert checker.is_inside(GeoFence(latitude=0, longitude=0, radius_m=1001), edge_lat, 0)
        assert not checker.is_inside(GeoFence(latitude=0, longitude=0, radius_m=999), edge_lat, 0)
