"""
Transaction Interface

Port interface for atomic units of work over the entity store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any


class TransactionManager(ABC):
    """Abstract interface for opening transactions.

    Implementations must let a transaction opened inside another one in the
    same task join the outer one, so several repositories can take part in a
    single atomic unit.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Serialised write transaction; commits on success, rolls back on error."""
        ...

    @abstractmethod
    def snapshot(self) -> AbstractAsyncContextManager[Any]:
        """Read-only transaction giving one consistent view across queries."""
        ...
