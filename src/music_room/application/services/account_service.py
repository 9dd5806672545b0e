"""Account Application Service - registration, tiers and lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.access.value_objects import Principal
from ...domain.accounts.entities import Account, AccountTier
from ...domain.shared.constants import LimitConstants
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.exceptions import EntityNotFoundError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.accounts.repository import AccountRepository
    from ..interfaces.transactions import TransactionManager

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        *,
        transactions: TransactionManager,
        account_repository: AccountRepository,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._accounts = account_repository
        self._clock = clock

    async def register(
        self,
        handle: str,
        contact: str,
        display_name: str | None = None,
        tier: AccountTier = AccountTier.STANDARD,
    ) -> Account:
        """Create an account.

        Raises:
            ConflictError: If the handle or contact is already registered.
        """
        account = Account(
            handle=handle,
            contact=contact,
            display_name=display_name,
            tier=tier,
            created_at=self._clock(),
        )
        async with self._tx.transaction():
            await self._accounts.add(account)
        logger.info(LogTemplates.ACCOUNT_REGISTERED, account.id, account.handle)
        return account

    async def get(self, account_id: str) -> Account:
        account = await self._accounts.get(account_id)
        if account is None:
            raise EntityNotFoundError("Account", account_id)
        return account

    async def set_tier(self, account_id: str, tier: AccountTier) -> Account:
        """Apply a tier decided by the billing flow."""
        async with self._tx.transaction():
            account = await self.get(account_id)
            if account.tier is not tier:
                await self._accounts.set_tier(account_id, tier)
                account = account.with_tier(tier)
                logger.info(LogTemplates.ACCOUNT_TIER_CHANGED, account_id, tier.value)
        return account

    async def search(self, prefix: str, limit: int = LimitConstants.DEFAULT_SEARCH_LIMIT) -> list[Account]:
        prefix = prefix.strip()
        if not prefix:
            return []
        return await self._accounts.search(prefix, limit)

    async def principal_for(self, account_id: str) -> Principal:
        return Principal.from_account(await self.get(account_id))
