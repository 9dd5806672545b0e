"""
Accounts Domain Repository Interfaces

Abstract base classes defining the contracts for account persistence.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from music_room.domain.accounts.entities import Account, AccountTier


class AccountRepository(ABC):
    """Abstract repository for accounts.

    Handles and contact addresses are unique; implementations must raise
    ``ConflictError`` when either is already taken.
    """

    @abstractmethod
    async def add(self, account: Account) -> Account:
        """Persist a new account.

        Args:
            account: The account to store.

        Returns:
            The stored account.

        Raises:
            ConflictError: If the handle or contact is already registered.
        """
        ...

    @abstractmethod
    async def get(self, account_id: str) -> Account | None:
        """Retrieve an account by id."""
        ...

    @abstractmethod
    async def get_by_handle(self, handle: str) -> Account | None:
        """Retrieve an account by its (case-insensitive) handle."""
        ...

    @abstractmethod
    async def set_tier(self, account_id: str, tier: AccountTier) -> bool:
        """Change an account's tier.

        Returns:
            True if the account existed and was updated.
        """
        ...

    @abstractmethod
    async def search(self, prefix: str, limit: int = 20) -> list[Account]:
        """Find accounts whose handle starts with ``prefix``, ordered by handle."""
        ...
