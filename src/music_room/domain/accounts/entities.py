"""Core domain entities for the accounts bounded context."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.types import (
    ContactStr,
    EntityId,
    HandleStr,
    NameStr,
    UtcDatetimeField,
    new_id,
)


class AccountTier(StrEnum):
    """Billing tier, decided by the external elevation flow."""

    STANDARD = "standard"
    ELEVATED = "elevated"


class Account(BaseModel):
    """A registered participant."""

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=new_id)
    handle: HandleStr
    contact: ContactStr
    tier: AccountTier = AccountTier.STANDARD
    display_name: NameStr | None = None
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def is_elevated(self) -> bool:
        return self.tier is AccountTier.ELEVATED

    @property
    def label(self) -> str:
        return self.display_name or self.handle

    def with_tier(self, tier: AccountTier) -> Account:
        return self.model_copy(update={"tier": tier})
