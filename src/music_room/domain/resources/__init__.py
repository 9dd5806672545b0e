"""
Resources Bounded Context

Events, editable lists and the invitations that grant membership in them.
"""

from music_room.domain.resources.entities import EditableList, Event, Invitation, Resource
from music_room.domain.resources.repository import InvitationRepository, ResourceRepository
from music_room.domain.resources.value_objects import (
    AccessTier,
    CollaboratorRole,
    EditPolicy,
    GeoFence,
    TimeWindow,
)

__all__ = [
    # Entities
    "Resource",
    "Event",
    "EditableList",
    "Invitation",
    # Value Objects
    "AccessTier",
    "EditPolicy",
    "CollaboratorRole",
    "GeoFence",
    "TimeWindow",
    # Repositories
    "ResourceRepository",
    "InvitationRepository",
]
