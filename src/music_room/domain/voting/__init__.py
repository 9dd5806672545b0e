"""
Voting Bounded Context

Up/down votes, tallies and the ranking they drive.
"""

from music_room.domain.voting.entities import Vote
from music_room.domain.voting.repository import VoteRepository
from music_room.domain.voting.services import RankingDomainService
from music_room.domain.voting.value_objects import VoteDirection

__all__ = [
    # Entities
    "Vote",
    # Value Objects
    "VoteDirection",
    # Repository
    "VoteRepository",
    # Services
    "RankingDomainService",
]
