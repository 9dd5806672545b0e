"""
Shared Domain Kernel

Contains types, enums and exceptions shared across all bounded contexts.
"""

from music_room.domain.shared.enums import HandshakeState, ResourceKind, Visibility
from music_room.domain.shared.exceptions import (
    ConflictError,
    DomainError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidOperationError,
    ValidationError,
)

__all__ = [
    "HandshakeState",
    "ResourceKind",
    "Visibility",
    "DomainError",
    "ValidationError",
    "InvalidArgumentError",
    "EntityNotFoundError",
    "ForbiddenError",
    "ConflictError",
    "InvalidOperationError",
]
