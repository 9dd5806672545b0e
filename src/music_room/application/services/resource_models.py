"""Partial-update models for events and editable lists."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.resources.value_objects import AccessTier, EditPolicy, GeoFence, TimeWindow
from ...domain.shared.enums import Visibility
from ...domain.shared.types import NameStr


class EventChanges(BaseModel):
    """Fields a host may change on an event. Unset fields are left alone."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: NameStr | None = None
    description: str | None = None
    visibility: Visibility | None = None
    access_tier: AccessTier | None = None
    geo_fence: GeoFence | None = None
    time_window: TimeWindow | None = None


class ListChanges(BaseModel):
    """Fields an owner may change on an editable list."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: NameStr | None = None
    description: str | None = None
    visibility: Visibility | None = None
    edit_policy: EditPolicy | None = None
