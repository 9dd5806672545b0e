"""SQLite database with per-operation connections and WAL mode.

Writes go through :meth:`Database.transaction`, which serialises writers with
an in-process lock and ``BEGIN IMMEDIATE``. A transaction opened while another
one is active in the same task joins it, so several repositories can take
part in one atomic unit. Reads go through :meth:`Database.snapshot` when they
need a consistent view across several queries.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite

from music_room.application.interfaces.transactions import TransactionManager
from music_room.domain.shared.constants import DatabaseTables, SQLPragmas, SQLStatements
from music_room.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

# (connection, writable) for the transaction active in the current task.
_ActiveSession = tuple[aiosqlite.Connection, bool]


class Database(TransactionManager):
    def __init__(self, url: str, settings: DatabaseSettings | None = None) -> None:
        if url.startswith("sqlite:///"):
            self._db_path = url[10:]  # Remove "sqlite:///"
        else:
            self._db_path = url

        self._initialized = False
        self._keepalive_conn: aiosqlite.Connection | None = None
        self._busy_timeout = settings.busy_timeout_ms if settings else 5000
        self._connection_timeout = settings.connection_timeout_s if settings else 10

        self._write_lock = asyncio.Lock()
        self._active: ContextVar[_ActiveSession | None] = ContextVar(
            f"music_room_db_{id(self)}", default=None
        )

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def in_transaction(self) -> bool:
        session = self._active.get()
        return session is not None and session[1]

    async def initialize(self) -> None:
        if self._initialized:
            return

        if self._db_path != ":memory:":
            db_dir = Path(self._db_path).parent
            db_dir.mkdir(parents=True, exist_ok=True)

        # Keep one connection alive for in-memory DBs; otherwise the shared
        # in-memory DB is destroyed once the last connection closes.
        if self._db_path == ":memory:" and self._keepalive_conn is None:
            self._keepalive_conn = await self._connect()

        async with self.transaction() as conn:
            await self._ensure_schema(conn)

        self._initialized = True
        logger.info(LogTemplates.DATABASE_INITIALIZED, self._db_path)

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS accounts (
                id TEXT PRIMARY KEY,
                handle TEXT NOT NULL COLLATE NOCASE UNIQUE,
                contact TEXT NOT NULL COLLATE NOCASE UNIQUE,
                tier TEXT NOT NULL DEFAULT 'standard'
                    CHECK (tier IN ('standard', 'elevated')),
                display_name TEXT,
                created_at TEXT NOT NULL
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS relationship_requests (
                id TEXT PRIMARY KEY,
                requester_id TEXT NOT NULL,
                recipient_id TEXT NOT NULL,
                state TEXT NOT NULL DEFAULT 'pending'
                    CHECK (state IN ('pending', 'accepted', 'declined')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                CHECK (requester_id <> recipient_id),
                FOREIGN KEY(requester_id) REFERENCES accounts(id),
                FOREIGN KEY(recipient_id) REFERENCES accounts(id)
            )
            """
        )
        # At most one pending request per ordered pair; resolved rows are history.
        await conn.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_requests_pending_pair
            ON relationship_requests(requester_id, recipient_id)
            WHERE state = 'pending'
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_requests_recipient ON relationship_requests(recipient_id, state)"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS relationships (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id TEXT NOT NULL,
                peer_id TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE (owner_id, peer_id),
                CHECK (owner_id <> peer_id),
                FOREIGN KEY(owner_id) REFERENCES accounts(id),
                FOREIGN KEY(peer_id) REFERENCES accounts(id)
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS events (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                visibility TEXT NOT NULL DEFAULT 'public',
                access_tier TEXT NOT NULL DEFAULT 'free',
                fence_latitude REAL,
                fence_longitude REAL,
                fence_radius_m INTEGER,
                starts_at TEXT,
                ends_at TEXT,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(owner_id) REFERENCES accounts(id)
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_events_public ON events(visibility, is_active, created_at)"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS editable_lists (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                visibility TEXT NOT NULL DEFAULT 'public',
                edit_policy TEXT NOT NULL DEFAULT 'open',
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                FOREIGN KEY(owner_id) REFERENCES accounts(id)
            )
            """
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS invitations (
                id TEXT PRIMARY KEY,
                resource_id TEXT NOT NULL,
                resource_kind TEXT NOT NULL CHECK (resource_kind IN ('event', 'list')),
                invitee_id TEXT NOT NULL,
                grantor_id TEXT NOT NULL,
                role TEXT NOT NULL DEFAULT 'collaborator',
                state TEXT NOT NULL DEFAULT 'pending'
                    CHECK (state IN ('pending', 'accepted', 'declined')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (resource_id, invitee_id),
                FOREIGN KEY(invitee_id) REFERENCES accounts(id)
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_invitations_invitee ON invitations(invitee_id, state)"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS tracks (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                resource_id TEXT NOT NULL,
                resource_kind TEXT NOT NULL CHECK (resource_kind IN ('event', 'list')),
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                album TEXT,
                duration_seconds INTEGER NOT NULL DEFAULT 0,
                artwork_url TEXT,
                video_id TEXT,
                catalog_uri TEXT,
                added_by TEXT NOT NULL,
                added_at TEXT NOT NULL,
                tally INTEGER NOT NULL DEFAULT 0 CHECK (tally >= 0),
                position INTEGER NOT NULL DEFAULT 0,
                state TEXT NOT NULL DEFAULT 'unplayed' CHECK (state IN ('unplayed', 'played')),
                CHECK (
                    COALESCE(TRIM(video_id), '') <> ''
                    OR COALESCE(TRIM(catalog_uri), '') <> ''
                )
            )
            """
        )
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_tracks_resource_pos ON tracks(resource_id, state, position)"
        )

        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS votes (
                account_id TEXT NOT NULL,
                track_id TEXT NOT NULL,
                resource_id TEXT NOT NULL,
                direction TEXT NOT NULL CHECK (direction IN ('up', 'down')),
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (account_id, track_id),
                FOREIGN KEY(track_id) REFERENCES tracks(id) ON DELETE CASCADE
            )
            """
        )
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_votes_track ON votes(track_id)")
        await conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_votes_account_resource ON votes(account_id, resource_id)"
        )

    async def _connect(self) -> aiosqlite.Connection:
        # SQLite ":memory:" is per-connection, so use a shared URI to allow
        # multiple connections to see the same in-memory database.
        if self._db_path == ":memory:":
            db_path = f"file:music-room-{id(self)}?mode=memory&cache=shared"
            uri = True
        else:
            db_path = self._db_path
            uri = False

        conn = await aiosqlite.connect(
            db_path,
            # detect_types=0 because our ISO 8601 timestamps use 'T' separator,
            # but SQLite's built-in converter expects space-separated format.
            detect_types=0,
            uri=uri,
            timeout=self._connection_timeout,
            # Transactions are opened explicitly with BEGIN / BEGIN IMMEDIATE.
            isolation_level=None,
        )
        conn.row_factory = aiosqlite.Row

        # WAL lets snapshot readers proceed while a writer holds the lock.
        await conn.execute(SQLPragmas.JOURNAL_MODE_WAL)
        await conn.execute(SQLPragmas.FOREIGN_KEYS_ON)
        await conn.execute(SQLPragmas.BUSY_TIMEOUT.format(timeout=self._busy_timeout))

        return conn

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """A dedicated connection in autocommit mode, closed on exit."""
        conn = await self._connect()
        try:
            yield conn
        finally:
            await conn.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Write transaction with auto-commit/rollback.

        Joins the write transaction already active in this task, if any.
        """
        session = self._active.get()
        if session is not None and session[1]:
            yield session[0]
            return

        async with self._write_lock, self.connection() as conn:
            await conn.execute(SQLStatements.BEGIN_IMMEDIATE)
            token = self._active.set((conn, True))
            try:
                yield conn
            except BaseException as e:
                await conn.rollback()
                logger.debug(LogTemplates.TRANSACTION_ROLLED_BACK, e)
                raise
            else:
                await conn.commit()
            finally:
                self._active.reset(token)

    @asynccontextmanager
    async def snapshot(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Read-only transaction giving one consistent view across queries.

        Joins whatever transaction is already active in this task.
        """
        session = self._active.get()
        if session is not None:
            yield session[0]
            return

        async with self.connection() as conn:
            await conn.execute(SQLStatements.BEGIN_DEFERRED)
            token = self._active.set((conn, False))
            try:
                yield conn
            finally:
                self._active.reset(token)
                await conn.rollback()

    @asynccontextmanager
    async def _reader(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        session = self._active.get()
        if session is not None:
            yield session[0]
            return
        async with self.connection() as conn:
            yield conn

    async def execute(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> aiosqlite.Cursor:
        """Execute a SQL statement.

        Note:
            Runs inside the active write transaction when there is one,
            otherwise in its own.
        """
        async with self.transaction() as conn:
            if parameters is not None:
                cursor = await conn.execute(sql, parameters)
            else:
                cursor = await conn.execute(sql)
            return cursor

    async def execute_many(self, sql: str, rows: Iterable[tuple[Any, ...]]) -> None:
        async with self.transaction() as conn:
            await conn.executemany(sql, rows)

    async def fetch_one(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> dict[str, Any] | None:
        """Fetch a single row."""
        async with self._reader() as conn:
            if parameters is not None:
                cursor = await conn.execute(sql, parameters)
            else:
                cursor = await conn.execute(sql)
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def fetch_all(
        self, sql: str, parameters: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Fetch all rows."""
        async with self._reader() as conn:
            if parameters is not None:
                cursor = await conn.execute(sql, parameters)
            else:
                cursor = await conn.execute(sql)
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_stats(self) -> dict[str, Any]:
        """Get database statistics.

        Returns:
            Dictionary with database statistics including file size,
            table counts, and page metrics.
        """
        stats: dict[str, Any] = {
            "db_path": self._db_path,
            "initialized": self._initialized,
            "tables": {},
        }

        db_file = Path(self._db_path)
        if db_file.exists():
            stats["file_size_bytes"] = db_file.stat().st_size
            stats["file_size_mb"] = round(db_file.stat().st_size / (1024 * 1024), 2)

        if not self._initialized:
            return stats

        try:
            async with self.snapshot() as conn:
                for table_name in DatabaseTables.ALL:
                    count_cursor = await conn.execute(
                        f"SELECT COUNT(*) FROM {table_name}"  # noqa: S608
                    )
                    count_row = await count_cursor.fetchone()
                    stats["tables"][table_name] = count_row[0] if count_row else 0

                page_cursor = await conn.execute(SQLPragmas.PAGE_COUNT)
                page_count_row = await page_cursor.fetchone()
                stats["page_count"] = page_count_row[0] if page_count_row else 0

                page_size_cursor = await conn.execute(SQLPragmas.PAGE_SIZE)
                page_size_row = await page_size_cursor.fetchone()
                stats["page_size"] = page_size_row[0] if page_size_row else 0

        except aiosqlite.Error as e:
            logger.error(LogTemplates.DATABASE_STATS_FAILED, e)
            stats["error"] = str(e)

        return stats

    async def close(self) -> None:
        """Close the database manager.

        For file-based DBs this is mostly a no-op. For in-memory DBs we also
        close the keepalive connection.
        """
        if self._keepalive_conn is not None:
            try:
                await self._keepalive_conn.close()
            finally:
                self._keepalive_conn = None
        self._initialized = False
        logger.info(LogTemplates.DATABASE_CLOSED)
