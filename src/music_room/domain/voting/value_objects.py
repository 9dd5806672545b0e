"""
Voting Domain Value Objects

Immutable value objects for the voting bounded context.
"""

from __future__ import annotations

from enum import StrEnum

from music_room.domain.shared.exceptions import InvalidArgumentError
from music_room.domain.shared.messages import ErrorMessages


class VoteDirection(StrEnum):
    """Direction of a single vote."""

    UP = "up"
    DOWN = "down"

    @property
    def weight(self) -> int:
        return 1 if self is VoteDirection.UP else -1

    @classmethod
    def parse(cls, value: VoteDirection | str) -> VoteDirection:
        """Coerce caller input into a direction.

        Raises:
            InvalidArgumentError: If ``value`` is neither ``up`` nor ``down``.
        """
        if isinstance(value, VoteDirection):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidArgumentError(
            ErrorMessages.INVALID_VOTE_DIRECTION.format(value=value), field="direction"
        )
