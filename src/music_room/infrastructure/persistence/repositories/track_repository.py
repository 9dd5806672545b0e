"""SQLite implementation of the track repository."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from music_room.domain.music.entities import Track
from music_room.domain.music.repository import TrackRepository
from music_room.domain.music.value_objects import TrackState
from music_room.domain.shared.datetime_utils import UtcDateTime
from music_room.domain.shared.enums import ResourceKind

if TYPE_CHECKING:
    from ..database import Database


class SQLiteTrackRepository(TrackRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, track: Track) -> Track:
        cursor = await self._db.execute(
            """
            INSERT INTO tracks (
                id, resource_id, resource_kind, title, artist, album,
                duration_seconds, artwork_url, video_id, catalog_uri,
                added_by, added_at, tally, position, state
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                track.id,
                track.resource_id,
                track.resource_kind.value,
                track.title,
                track.artist,
                track.album,
                track.duration_seconds,
                track.artwork_url,
                track.video_id,
                track.catalog_uri,
                track.added_by,
                UtcDateTime(track.added_at).iso,
                track.tally,
                track.position,
                track.state.value,
            ),
        )
        return track.model_copy(update={"sequence": cursor.lastrowid or 0})

    async def get(self, track_id: str) -> Track | None:
        row = await self._db.fetch_one("SELECT * FROM tracks WHERE id = ?", (track_id,))
        return self._row_to_track(row) if row else None

    async def list_for_resource(self, resource_id: str) -> list[Track]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM tracks
            WHERE resource_id = ?
            ORDER BY
                CASE state WHEN 'unplayed' THEN 0 ELSE 1 END,
                position ASC,
                seq ASC
            """,
            (resource_id,),
        )
        return [self._row_to_track(row) for row in rows]

    async def count_for_resource(self, resource_id: str) -> int:
        row = await self._db.fetch_one(
            "SELECT COUNT(*) AS total FROM tracks WHERE resource_id = ?", (resource_id,)
        )
        return row["total"] if row else 0

    async def delete(self, track_id: str) -> bool:
        cursor = await self._db.execute("DELETE FROM tracks WHERE id = ?", (track_id,))
        return cursor.rowcount > 0

    async def mark_played(self, track_id: str) -> bool:
        cursor = await self._db.execute(
            "UPDATE tracks SET state = 'played' WHERE id = ? AND state = 'unplayed'",
            (track_id,),
        )
        return cursor.rowcount > 0

    async def set_tally(self, track_id: str, tally: int) -> bool:
        cursor = await self._db.execute(
            "UPDATE tracks SET tally = ? WHERE id = ?", (tally, track_id)
        )
        return cursor.rowcount > 0

    async def set_positions(self, positions: Iterable[tuple[str, int]]) -> None:
        await self._db.execute_many(
            "UPDATE tracks SET position = ? WHERE id = ?",
            [(position, track_id) for track_id, position in positions],
        )

    def _row_to_track(self, row: dict[str, Any]) -> Track:
        return Track(
            id=row["id"],
            resource_id=row["resource_id"],
            resource_kind=ResourceKind(row["resource_kind"]),
            title=row["title"],
            artist=row["artist"],
            album=row["album"],
            duration_seconds=row["duration_seconds"],
            artwork_url=row["artwork_url"],
            video_id=row["video_id"],
            catalog_uri=row["catalog_uri"],
            added_by=row["added_by"],
            added_at=UtcDateTime.from_iso(row["added_at"]).dt,
            sequence=row["seq"],
            tally=row["tally"],
            position=row["position"],
            state=TrackState(row["state"]),
        )
