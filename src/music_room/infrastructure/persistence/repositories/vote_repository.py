"""SQLite implementation of the vote repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from music_room.domain.shared.datetime_utils import UtcDateTime
from music_room.domain.voting.entities import Vote
from music_room.domain.voting.repository import VoteRepository
from music_room.domain.voting.value_objects import VoteDirection

if TYPE_CHECKING:
    from ..database import Database


class SQLiteVoteRepository(VoteRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def upsert(self, vote: Vote) -> Vote:
        async with self._db.transaction() as conn:
            await conn.execute(
                """
                INSERT INTO votes (account_id, track_id, resource_id, direction, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(account_id, track_id) DO UPDATE SET
                    direction = excluded.direction,
                    updated_at = excluded.updated_at
                """,
                (
                    vote.account_id,
                    vote.track_id,
                    vote.resource_id,
                    vote.direction.value,
                    UtcDateTime(vote.created_at).iso,
                    UtcDateTime(vote.updated_at).iso,
                ),
            )
            cursor = await conn.execute(
                "SELECT * FROM votes WHERE account_id = ? AND track_id = ?",
                (vote.account_id, vote.track_id),
            )
            row = await cursor.fetchone()
        return self._row_to_vote(dict(row)) if row else vote

    async def get(self, account_id: str, track_id: str) -> Vote | None:
        row = await self._db.fetch_one(
            "SELECT * FROM votes WHERE account_id = ? AND track_id = ?",
            (account_id, track_id),
        )
        return self._row_to_vote(row) if row else None

    async def delete(self, account_id: str, track_id: str) -> bool:
        cursor = await self._db.execute(
            "DELETE FROM votes WHERE account_id = ? AND track_id = ?",
            (account_id, track_id),
        )
        return cursor.rowcount > 0

    async def directions_for_track(self, track_id: str) -> list[VoteDirection]:
        rows = await self._db.fetch_all(
            "SELECT direction FROM votes WHERE track_id = ?", (track_id,)
        )
        return [VoteDirection(row["direction"]) for row in rows]

    async def list_for_account(self, account_id: str, resource_id: str) -> list[Vote]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM votes
            WHERE account_id = ? AND resource_id = ?
            ORDER BY created_at ASC
            """,
            (account_id, resource_id),
        )
        return [self._row_to_vote(row) for row in rows]

    def _row_to_vote(self, row: dict[str, Any]) -> Vote:
        return Vote(
            account_id=row["account_id"],
            track_id=row["track_id"],
            resource_id=row["resource_id"],
            direction=VoteDirection(row["direction"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )
