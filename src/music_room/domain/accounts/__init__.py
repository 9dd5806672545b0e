"""
Accounts Bounded Context

Identity records and billing tiers.
"""

from music_room.domain.accounts.entities import Account, AccountTier
from music_room.domain.accounts.repository import AccountRepository

__all__ = [
    "Account",
    "AccountTier",
    "AccountRepository",
]
