"""Core domain entities for the resources bounded context."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from music_room.domain.resources.value_objects import (
    AccessTier,
    CollaboratorRole,
    EditPolicy,
    GeoFence,
    TimeWindow,
)
from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.enums import HandshakeState, ResourceKind, Visibility
from music_room.domain.shared.exceptions import InvalidOperationError
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.shared.types import EntityId, NameStr, UtcDatetimeField, new_id


class Resource(BaseModel):
    """Common shape of everything tracks, votes and membership hang off."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[ResourceKind]

    id: EntityId = Field(default_factory=new_id)
    owner_id: EntityId
    name: NameStr
    description: str = ""
    visibility: Visibility = Visibility.PUBLIC
    is_active: bool = True
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    def is_owned_by(self, account_id: str) -> bool:
        return self.owner_id == account_id

    def with_active(self, is_active: bool, now: datetime | None = None) -> Resource:
        return self.model_copy(update={"is_active": is_active, "updated_at": now or utcnow()})


class Event(Resource):
    """A hosted listening event whose tracks are ranked by votes."""

    kind: ClassVar[ResourceKind] = ResourceKind.EVENT

    access_tier: AccessTier = AccessTier.FREE
    geo_fence: GeoFence | None = None
    time_window: TimeWindow | None = None

    @model_validator(mode="after")
    def _check_fence(self) -> Event:
        if self.geo_fence is not None and self.access_tier is not AccessTier.LOCATION_BOUNDED:
            raise ValueError(ErrorMessages.FENCE_REQUIRES_LOCATION_TIER)
        return self

    @property
    def host_id(self) -> str:
        return self.owner_id

    @property
    def is_location_bounded(self) -> bool:
        return self.access_tier is AccessTier.LOCATION_BOUNDED


class EditableList(Resource):
    """A collaborative track list ordered by its editors."""

    kind: ClassVar[ResourceKind] = ResourceKind.LIST

    edit_policy: EditPolicy = EditPolicy.OPEN

    @property
    def is_open(self) -> bool:
        return self.edit_policy is EditPolicy.OPEN


class Invitation(BaseModel):
    """Membership of one account in one resource."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=new_id)
    resource_id: EntityId
    resource_kind: ResourceKind
    invitee_id: EntityId
    grantor_id: EntityId
    role: CollaboratorRole = CollaboratorRole.COLLABORATOR
    state: HandshakeState = HandshakeState.PENDING
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.state is HandshakeState.PENDING

    @property
    def is_accepted(self) -> bool:
        return self.state is HandshakeState.ACCEPTED

    def grants_access_to(self, resource_id: str, account_id: str) -> bool:
        return self.is_accepted and self.resource_id == resource_id and self.invitee_id == account_id

    def respond(self, accept: bool, now: datetime | None = None) -> Invitation:
        if not self.is_pending:
            raise InvalidOperationError("respond", self.state.value)
        state = HandshakeState.ACCEPTED if accept else HandshakeState.DECLINED
        return self.model_copy(update={"state": state, "updated_at": now or utcnow()})

    def reopen(
        self, grantor_id: str, role: CollaboratorRole, now: datetime | None = None
    ) -> Invitation:
        """Turn a declined invitation back into a pending one."""
        if self.state is not HandshakeState.DECLINED:
            raise InvalidOperationError("reopen", self.state.value)
        return self.model_copy(
            update={
                "state": HandshakeState.PENDING,
                "grantor_id": grantor_id,
                "role": role,
                "updated_at": now or utcnow(),
            }
        )
