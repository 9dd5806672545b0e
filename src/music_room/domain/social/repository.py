"""
Social Domain Repository Interfaces

Abstract base classes defining the contracts for request and relationship
persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from music_room.domain.shared.enums import HandshakeState
from music_room.domain.social.entities import Relationship, RelationshipRequest


class RelationshipRepository(ABC):
    """Abstract repository for relationship requests and edges.

    Storage guarantees: at most one pending request per ordered
    (requester, recipient) pair and at most one edge per (owner, peer).
    """

    # --- Requests ---

    @abstractmethod
    async def add_request(self, request: RelationshipRequest) -> RelationshipRequest:
        """Persist a new pending request.

        Raises:
            ConflictError: If a pending request already exists for the pair.
        """
        ...

    @abstractmethod
    async def get_request(self, request_id: str) -> RelationshipRequest | None:
        ...

    @abstractmethod
    async def find_pending(self, requester_id: str, recipient_id: str) -> RelationshipRequest | None:
        """Return the pending request for the ordered pair, if any."""
        ...

    @abstractmethod
    async def update_state(
        self, request_id: str, state: HandshakeState, updated_at: datetime
    ) -> bool:
        """Move a *pending* request to ``state``.

        Returns:
            True if a pending row was updated, False if it was already resolved.
        """
        ...

    @abstractmethod
    async def delete_request(self, request_id: str) -> bool:
        ...

    @abstractmethod
    async def list_received(self, account_id: str) -> list[RelationshipRequest]:
        """Pending requests addressed to ``account_id``, newest first."""
        ...

    @abstractmethod
    async def list_sent(self, account_id: str) -> list[RelationshipRequest]:
        """Pending requests sent by ``account_id``, newest first."""
        ...

    # --- Edges ---

    @abstractmethod
    async def add_edges(self, edges: list[Relationship]) -> int:
        """Insert edges, ignoring any that already exist.

        Returns:
            Number of edges actually inserted.
        """
        ...

    @abstractmethod
    async def has_edge(self, owner_id: str, peer_id: str) -> bool:
        ...

    @abstractmethod
    async def list_edges(self, owner_id: str) -> list[Relationship]:
        """Edges owned by ``owner_id``, most recent first."""
        ...

    @abstractmethod
    async def delete_edge(self, owner_id: str, peer_id: str) -> bool:
        ...
