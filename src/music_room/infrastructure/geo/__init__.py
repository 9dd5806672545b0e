"""Geolocation adapters."""

from music_room.infrastructure.geo.haversine import HaversineGeoFenceChecker

__all__ = ["HaversineGeoFenceChecker"]
