"""Core domain entities for the social bounded context."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.enums import HandshakeState
from music_room.domain.shared.exceptions import InvalidOperationError
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.shared.types import EntityId, NonNegativeInt, UtcDatetimeField, new_id


class ResolveOutcome(StrEnum):
    """What a recipient does with a pending request."""

    ACCEPT = "accept"
    DECLINE = "decline"

    @property
    def target_state(self) -> HandshakeState:
        return HandshakeState.ACCEPTED if self is ResolveOutcome.ACCEPT else HandshakeState.DECLINED


class RelationshipRequest(BaseModel):
    """A one-sided connection request awaiting the recipient's answer."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=new_id)
    requester_id: EntityId
    recipient_id: EntityId
    state: HandshakeState = HandshakeState.PENDING
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _check_not_self(self) -> RelationshipRequest:
        if self.requester_id == self.recipient_id:
            raise ValueError(ErrorMessages.SELF_REQUEST)
        return self

    @property
    def is_pending(self) -> bool:
        return self.state is HandshakeState.PENDING

    def involves(self, account_id: str) -> bool:
        return account_id in (self.requester_id, self.recipient_id)

    def resolve(self, outcome: ResolveOutcome, now: datetime | None = None) -> RelationshipRequest:
        """Return the resolved copy of this request.

        Raises:
            InvalidOperationError: If the request was already resolved.
        """
        if not self.is_pending:
            raise InvalidOperationError(outcome.value, self.state.value)
        return self.model_copy(update={"state": outcome.target_state, "updated_at": now or utcnow()})


class Relationship(BaseModel):
    """One stored direction of a confirmed connection, owned by ``owner_id``."""

    model_config = ConfigDict(frozen=True)

    owner_id: EntityId
    peer_id: EntityId
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    sequence: NonNegativeInt = 0

    @model_validator(mode="after")
    def _check_not_self(self) -> Relationship:
        if self.owner_id == self.peer_id:
            raise ValueError(ErrorMessages.SELF_REQUEST)
        return self
