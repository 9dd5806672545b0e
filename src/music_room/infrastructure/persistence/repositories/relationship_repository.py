"""SQLite implementation of the relationship repository."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

import aiosqlite

from music_room.domain.shared.datetime_utils import UtcDateTime
from music_room.domain.shared.enums import HandshakeState
from music_room.domain.shared.exceptions import ConflictError
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.social.entities import Relationship, RelationshipRequest
from music_room.domain.social.repository import RelationshipRepository

if TYPE_CHECKING:
    from ..database import Database


class SQLiteRelationshipRepository(RelationshipRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    # --- Requests ---

    async def add_request(self, request: RelationshipRequest) -> RelationshipRequest:
        try:
            await self._db.execute(
                """
                INSERT INTO relationship_requests
                    (id, requester_id, recipient_id, state, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    request.id,
                    request.requester_id,
                    request.recipient_id,
                    request.state.value,
                    UtcDateTime(request.created_at).iso,
                    UtcDateTime(request.updated_at).iso,
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise ConflictError("RelationshipRequest", ErrorMessages.REQUEST_ALREADY_PENDING) from e
        return request

    async def get_request(self, request_id: str) -> RelationshipRequest | None:
        row = await self._db.fetch_one(
            "SELECT * FROM relationship_requests WHERE id = ?", (request_id,)
        )
        return self._row_to_request(row) if row else None

    async def find_pending(self, requester_id: str, recipient_id: str) -> RelationshipRequest | None:
        row = await self._db.fetch_one(
            """
            SELECT * FROM relationship_requests
            WHERE requester_id = ? AND recipient_id = ? AND state = 'pending'
            """,
            (requester_id, recipient_id),
        )
        return self._row_to_request(row) if row else None

    async def update_state(
        self, request_id: str, state: HandshakeState, updated_at: datetime
    ) -> bool:
        cursor = await self._db.execute(
            """
            UPDATE relationship_requests SET state = ?, updated_at = ?
            WHERE id = ? AND state = 'pending'
            """,
            (state.value, UtcDateTime(updated_at).iso, request_id),
        )
        return cursor.rowcount > 0

    async def delete_request(self, request_id: str) -> bool:
        cursor = await self._db.execute(
            "DELETE FROM relationship_requests WHERE id = ?", (request_id,)
        )
        return cursor.rowcount > 0

    async def list_received(self, account_id: str) -> list[RelationshipRequest]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM relationship_requests
            WHERE recipient_id = ? AND state = 'pending'
            ORDER BY created_at DESC, rowid DESC
            """,
            (account_id,),
        )
        return [self._row_to_request(row) for row in rows]

    async def list_sent(self, account_id: str) -> list[RelationshipRequest]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM relationship_requests
            WHERE requester_id = ? AND state = 'pending'
            ORDER BY created_at DESC, rowid DESC
            """,
            (account_id,),
        )
        return [self._row_to_request(row) for row in rows]

    # --- Edges ---

    async def add_edges(self, edges: list[Relationship]) -> int:
        inserted = 0
        async with self._db.transaction() as conn:
            for edge in edges:
                cursor = await conn.execute(
                    """
                    INSERT OR IGNORE INTO relationships (owner_id, peer_id, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (edge.owner_id, edge.peer_id, UtcDateTime(edge.created_at).iso),
                )
                inserted += cursor.rowcount
        return inserted

    async def has_edge(self, owner_id: str, peer_id: str) -> bool:
        row = await self._db.fetch_one(
            "SELECT 1 FROM relationships WHERE owner_id = ? AND peer_id = ?",
            (owner_id, peer_id),
        )
        return row is not None

    async def list_edges(self, owner_id: str) -> list[Relationship]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM relationships
            WHERE owner_id = ?
            ORDER BY created_at DESC, seq DESC
            """,
            (owner_id,),
        )
        return [
            Relationship(
                owner_id=row["owner_id"],
                peer_id=row["peer_id"],
                created_at=UtcDateTime.from_iso(row["created_at"]).dt,
                sequence=row["seq"],
            )
            for row in rows
        ]

    async def delete_edge(self, owner_id: str, peer_id: str) -> bool:
        cursor = await self._db.execute(
            "DELETE FROM relationships WHERE owner_id = ? AND peer_id = ?",
            (owner_id, peer_id),
        )
        return cursor.rowcount > 0

    def _row_to_request(self, row: dict[str, Any]) -> RelationshipRequest:
        return RelationshipRequest(
            id=row["id"],
            requester_id=row["requester_id"],
            recipient_id=row["recipient_id"],
            state=HandshakeState(row["state"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )
