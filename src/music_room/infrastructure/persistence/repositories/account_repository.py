"""SQLite implementation of the account repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import aiosqlite

from music_room.domain.accounts.entities import Account, AccountTier
from music_room.domain.accounts.repository import AccountRepository
from music_room.domain.shared.datetime_utils import UtcDateTime
from music_room.domain.shared.exceptions import ConflictError
from music_room.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ..database import Database


class SQLiteAccountRepository(AccountRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, account: Account) -> Account:
        try:
            await self._db.execute(
                """
                INSERT INTO accounts (id, handle, contact, tier, display_name, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    account.id,
                    account.handle,
                    account.contact,
                    account.tier.value,
                    account.display_name,
                    UtcDateTime(account.created_at).iso,
                ),
            )
        except aiosqlite.IntegrityError as e:
            if "handle" in str(e):
                raise ConflictError(
                    "Account", ErrorMessages.HANDLE_TAKEN.format(handle=account.handle)
                ) from e
            raise ConflictError("Account", ErrorMessages.CONTACT_TAKEN) from e
        return account

    async def get(self, account_id: str) -> Account | None:
        row = await self._db.fetch_one("SELECT * FROM accounts WHERE id = ?", (account_id,))
        return self._row_to_account(row) if row else None

    async def get_by_handle(self, handle: str) -> Account | None:
        row = await self._db.fetch_one("SELECT * FROM accounts WHERE handle = ?", (handle,))
        return self._row_to_account(row) if row else None

    async def set_tier(self, account_id: str, tier: AccountTier) -> bool:
        cursor = await self._db.execute(
            "UPDATE accounts SET tier = ? WHERE id = ?", (tier.value, account_id)
        )
        return cursor.rowcount > 0

    async def search(self, prefix: str, limit: int = 20) -> list[Account]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = await self._db.fetch_all(
            """
            SELECT * FROM accounts
            WHERE handle LIKE ? ESCAPE '\\'
            ORDER BY handle COLLATE NOCASE ASC
            LIMIT ?
            """,
            (f"{escaped}%", limit),
        )
        return [self._row_to_account(row) for row in rows]

    def _row_to_account(self, row: dict[str, Any]) -> Account:
        return Account(
            id=row["id"],
            handle=row["handle"],
            contact=row["contact"],
            tier=AccountTier(row["tier"]),
            display_name=row["display_name"],
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
        )
