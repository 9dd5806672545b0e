"""
Voting Domain Repository Interfaces

Abstract base classes defining the contracts for vote persistence.
"""

from abc import ABC, abstractmethod

from music_room.domain.voting.entities import Vote
from music_room.domain.voting.value_objects import VoteDirection


class VoteRepository(ABC):
    """Abstract repository for votes."""

    @abstractmethod
    async def upsert(self, vote: Vote) -> Vote:
        """Insert a vote or replace the direction of the existing one.

        Returns:
            The stored vote. ``created_at`` is preserved on replacement.
        """
        ...

    @abstractmethod
    async def get(self, account_id: str, track_id: str) -> Vote | None:
        ...

    @abstractmethod
    async def delete(self, account_id: str, track_id: str) -> bool:
        ...

    @abstractmethod
    async def directions_for_track(self, track_id: str) -> list[VoteDirection]:
        """Every stored vote direction on ``track_id``."""
        ...

    @abstractmethod
    async def list_for_account(self, account_id: str, resource_id: str) -> list[Vote]:
        """The account's votes in one resource, oldest first."""
        ...
