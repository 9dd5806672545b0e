"""Immutable value objects for the resources bounded context."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from music_room.domain.shared.constants import LimitConstants
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.shared.types import Latitude, Longitude, RadiusMeters, UtcDatetimeField


class AccessTier(StrEnum):
    """Who may vote in an event."""

    FREE = "free"
    PREMIUM = "premium"
    LOCATION_BOUNDED = "location_bounded"


class EditPolicy(StrEnum):
    """Who may add, move and remove tracks in an editable list."""

    OPEN = "open"
    INVITE_ONLY = "invite_only"


class CollaboratorRole(StrEnum):
    """Role granted by an invitation. Ordered: viewer < collaborator."""

    VIEWER = "viewer"
    COLLABORATOR = "collaborator"

    @property
    def rank(self) -> int:
        return {
            CollaboratorRole.VIEWER: 0,
            CollaboratorRole.COLLABORATOR: 1,
        }[self]

    def at_least(self, other: CollaboratorRole) -> bool:
        return self.rank >= other.rank


class GeoFence(BaseModel):
    """Circular area an event is bound to.

    Membership is decided by the geolocation collaborator; the core only
    stores the fence and consumes the boolean answer.
    """

    model_config = ConfigDict(frozen=True)

    latitude: Latitude
    longitude: Longitude
    radius_m: RadiusMeters = LimitConstants.DEFAULT_FENCE_RADIUS_M


class TimeWindow(BaseModel):
    """Optional start and end bounding when votes are accepted."""

    model_config = ConfigDict(frozen=True)

    starts_at: UtcDatetimeField | None = None
    ends_at: UtcDatetimeField | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> TimeWindow:
        if self.starts_at is None and self.ends_at is None:
            raise ValueError(ErrorMessages.TIME_WINDOW_EMPTY)
        if self.starts_at is not None and self.ends_at is not None and self.starts_at > self.ends_at:
            raise ValueError(ErrorMessages.TIME_WINDOW_ORDER)
        return self

    def contains(self, moment: datetime) -> bool:
        if self.starts_at is not None and moment < self.starts_at:
            return False
        if self.ends_at is not None and moment > self.ends_at:
            return False
        return True
