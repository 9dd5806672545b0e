"""
Social Domain Services

Rules for turning a one-sided request into a symmetric connection.
"""

from __future__ import annotations

from datetime import datetime

from music_room.domain.shared.exceptions import InvalidArgumentError
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.social.entities import Relationship, RelationshipRequest


class RelationshipDomainService:
    """Domain service for relationship business rules."""

    @classmethod
    def validate_pair(cls, requester_id: str, recipient_id: str) -> None:
        """Reject self-directed requests.

        Raises:
            InvalidArgumentError: If both ids are the same account.
        """
        if requester_id == recipient_id:
            raise InvalidArgumentError(ErrorMessages.SELF_REQUEST, field="recipient_id")

    @classmethod
    def edges_for(cls, request: RelationshipRequest, now: datetime) -> list[Relationship]:
        """Both directions of the connection created by accepting ``request``.

        The two edges always travel together; callers insert them in a single
        transaction so the pair is never observed half-applied.
        """
        return [
            Relationship(owner_id=request.requester_id, peer_id=request.recipient_id, created_at=now),
            Relationship(owner_id=request.recipient_id, peer_id=request.requester_id, created_at=now),
        ]
