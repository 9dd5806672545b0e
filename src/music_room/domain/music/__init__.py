"""
Music Bounded Context

Candidate tracks added to events and editable lists.
"""

from music_room.domain.music.entities import Track
from music_room.domain.music.repository import TrackRepository
from music_room.domain.music.value_objects import TrackDraft, TrackState

__all__ = [
    "Track",
    "TrackDraft",
    "TrackState",
    "TrackRepository",
]
