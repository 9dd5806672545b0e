"""
Social Bounded Context

Friend requests and the symmetric connections they produce.
"""

from music_room.domain.social.entities import Relationship, RelationshipRequest, ResolveOutcome
from music_room.domain.social.repository import RelationshipRepository
from music_room.domain.social.services import RelationshipDomainService

__all__ = [
    # Entities
    "RelationshipRequest",
    "Relationship",
    # Value Objects
    "ResolveOutcome",
    # Repository
    "RelationshipRepository",
    # Services
    "RelationshipDomainService",
]
