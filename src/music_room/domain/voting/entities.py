"""Core domain entities for the voting bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.types import EntityId, UtcDatetimeField
from music_room.domain.voting.value_objects import VoteDirection


class Vote(BaseModel):
    """One account's current vote on one track.

    There is at most one vote per (account, track); a later vote replaces
    the earlier one.
    """

    model_config = ConfigDict(frozen=True)

    account_id: EntityId
    track_id: EntityId
    resource_id: EntityId
    direction: VoteDirection
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def weight(self) -> int:
        return self.direction.weight

    def redirect(self, direction: VoteDirection, now: datetime | None = None) -> Vote:
        return self.model_copy(update={"direction": direction, "updated_at": now or utcnow()})
