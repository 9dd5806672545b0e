"""Great-circle geo-fence checks."""

from __future__ import annotations

import math

from music_room.application.interfaces.geolocation import GeoFenceChecker
from music_room.domain.resources.value_objects import GeoFence

EARTH_RADIUS_M = 6_371_000.0


def distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance between two coordinates, in metres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


class HaversineGeoFenceChecker(GeoFenceChecker):
    """Treats a fence as a circle on a spherical earth. The boundary counts as inside."""

    def is_inside(self, fence: GeoFence, latitude: float, longitude: float) -> bool:
        return distance_m(fence.latitude, fence.longitude, latitude, longitude) <= fence.radius_m
