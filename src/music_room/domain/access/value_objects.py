"""Immutable value objects for the access bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from music_room.domain.accounts.entities import Account, AccountTier
from music_room.domain.shared.types import EntityId


class Principal(BaseModel):
    """The account on whose behalf an operation is evaluated."""

    model_config = ConfigDict(frozen=True)

    account_id: EntityId
    tier: AccountTier = AccountTier.STANDARD

    @classmethod
    def from_account(cls, account: Account) -> Principal:
        return cls(account_id=account.id, tier=account.tier)

    @property
    def is_elevated(self) -> bool:
        return self.tier is AccountTier.ELEVATED
