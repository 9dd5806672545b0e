"""
Music Domain Repository Interfaces

Abstract base classes defining the contracts for track persistence.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from music_room.domain.music.entities import Track


class TrackRepository(ABC):
    """Abstract repository for tracks.

    Deleting a track removes its votes with it.
    """

    @abstractmethod
    async def add(self, track: Track) -> Track:
        """Persist a new track.

        Returns:
            The stored track with its insertion sequence assigned.
        """
        ...

    @abstractmethod
    async def get(self, track_id: str) -> Track | None:
        ...

    @abstractmethod
    async def list_for_resource(self, resource_id: str) -> list[Track]:
        """All tracks of a resource: unplayed by position, then played."""
        ...

    @abstractmethod
    async def count_for_resource(self, resource_id: str) -> int:
        ...

    @abstractmethod
    async def delete(self, track_id: str) -> bool:
        ...

    @abstractmethod
    async def mark_played(self, track_id: str) -> bool:
        """Move an unplayed track to played.

        Returns:
            True if the track changed state.
        """
        ...

    @abstractmethod
    async def set_tally(self, track_id: str, tally: int) -> bool:
        ...

    @abstractmethod
    async def set_positions(self, positions: Iterable[tuple[str, int]]) -> None:
        """Write ``(track_id, position)`` pairs produced by the ranking engine."""
        ...
