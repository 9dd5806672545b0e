"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from music_room.application.interfaces.geolocation import GeoFenceChecker
from music_room.application.interfaces.media_lookup import MediaCandidate, MediaLookup
from music_room.application.interfaces.transactions import TransactionManager

__all__ = [
    "GeoFenceChecker",
    "MediaLookup",
    "MediaCandidate",
    "TransactionManager",
]
