"""Shared string enumerations for type-safe comparisons across contexts."""

from __future__ import annotations

from enum import StrEnum


class HandshakeState(StrEnum):
    """Lifecycle of a request or invitation.

    ``pending`` is the only state that may transition; ``accepted`` and
    ``declined`` are terminal.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"

    @property
    def is_resolved(self) -> bool:
        return self is not HandshakeState.PENDING


class ResourceKind(StrEnum):
    """Scope within which tracks, votes and membership are evaluated."""

    EVENT = "event"
    LIST = "list"


class Visibility(StrEnum):
    PUBLIC = "public"
    PRIVATE = "private"
