"""SQLite repository implementations."""

from music_room.infrastructure.persistence.repositories.account_repository import (
    SQLiteAccountRepository,
)
from music_room.infrastructure.persistence.repositories.relationship_repository import (
    SQLiteRelationshipRepository,
)
from music_room.infrastructure.persistence.repositories.resource_repository import (
    SQLiteInvitationRepository,
    SQLiteResourceRepository,
)
from music_room.infrastructure.persistence.repositories.track_repository import (
    SQLiteTrackRepository,
)
from music_room.infrastructure.persistence.repositories.vote_repository import (
    SQLiteVoteRepository,
)

__all__ = [
    "SQLiteAccountRepository",
    "SQLiteRelationshipRepository",
    "SQLiteResourceRepository",
    "SQLiteInvitationRepository",
    "SQLiteTrackRepository",
    "SQLiteVoteRepository",
]
