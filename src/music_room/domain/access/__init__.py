"""
Access Bounded Context

Who may see, vote on, edit and manage events and editable lists.
"""

from music_room.domain.access.services import AccessEvaluator
from music_room.domain.access.value_objects import Principal

__all__ = [
    "AccessEvaluator",
    "Principal",
]
