"""SQLite implementation of the resource and invitation repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import aiosqlite

from music_room.domain.resources.entities import EditableList, Event, Invitation, Resource
from music_room.domain.resources.repository import InvitationRepository, ResourceRepository
from music_room.domain.resources.value_objects import (
    AccessTier,
    CollaboratorRole,
    EditPolicy,
    GeoFence,
    TimeWindow,
)
from music_room.domain.shared.datetime_utils import UtcDateTime, to_iso
from music_room.domain.shared.enums import HandshakeState, ResourceKind, Visibility
from music_room.domain.shared.exceptions import ConflictError
from music_room.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ..database import Database


class SQLiteResourceRepository(ResourceRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, resource: Resource) -> Resource:
        if isinstance(resource, Event):
            await self._db.execute(
                """
                INSERT INTO events (
                    id, owner_id, name, description, visibility, access_tier,
                    fence_latitude, fence_longitude, fence_radius_m,
                    starts_at, ends_at, is_active, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (resource.id, resource.owner_id, *self._event_columns(resource)),
            )
        elif isinstance(resource, EditableList):
            await self._db.execute(
                """
                INSERT INTO editable_lists (
                    id, owner_id, name, description, visibility, edit_policy,
                    is_active, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (resource.id, resource.owner_id, *self._list_columns(resource)),
            )
        else:
            raise TypeError(f"Unsupported resource type: {type(resource).__name__}")
        return resource

    async def get(self, resource_id: str) -> Resource | None:
        event = await self.get_event(resource_id)
        if event is not None:
            return event
        return await self.get_list(resource_id)

    async def get_event(self, event_id: str) -> Event | None:
        row = await self._db.fetch_one("SELECT * FROM events WHERE id = ?", (event_id,))
        return self._row_to_event(row) if row else None

    async def get_list(self, list_id: str) -> EditableList | None:
        row = await self._db.fetch_one("SELECT * FROM editable_lists WHERE id = ?", (list_id,))
        return self._row_to_list(row) if row else None

    async def update(self, resource: Resource) -> bool:
        if isinstance(resource, Event):
            cursor = await self._db.execute(
                """
                UPDATE events SET
                    name = ?, description = ?, visibility = ?, access_tier = ?,
                    fence_latitude = ?, fence_longitude = ?, fence_radius_m = ?,
                    starts_at = ?, ends_at = ?, is_active = ?, created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (*self._event_columns(resource), resource.id),
            )
        elif isinstance(resource, EditableList):
            cursor = await self._db.execute(
                """
                UPDATE editable_lists SET
                    name = ?, description = ?, visibility = ?, edit_policy = ?,
                    is_active = ?, created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (*self._list_columns(resource), resource.id),
            )
        else:
            raise TypeError(f"Unsupported resource type: {type(resource).__name__}")
        return cursor.rowcount > 0

    async def list_public_events(self, limit: int = 50) -> list[Event]:
        rows = await self._db.fetch_all(
            """
            SELECT * FROM events
            WHERE visibility = 'public' AND is_active = 1
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (limit,),
        )
        return [self._row_to_event(row) for row in rows]

    async def list_owned(self, owner_id: str) -> list[Resource]:
        event_rows = await self._db.fetch_all(
            "SELECT * FROM events WHERE owner_id = ?", (owner_id,)
        )
        list_rows = await self._db.fetch_all(
            "SELECT * FROM editable_lists WHERE owner_id = ?", (owner_id,)
        )
        resources: list[Resource] = [self._row_to_event(row) for row in event_rows]
        resources.extend(self._row_to_list(row) for row in list_rows)
        return sorted(resources, key=lambda r: r.created_at, reverse=True)

    @staticmethod
    def _event_columns(event: Event) -> tuple[Any, ...]:
        fence = event.geo_fence
        window = event.time_window
        return (
            event.name,
            event.description,
            event.visibility.value,
            event.access_tier.value,
            fence.latitude if fence else None,
            fence.longitude if fence else None,
            fence.radius_m if fence else None,
            to_iso(window.starts_at) if window else None,
            to_iso(window.ends_at) if window else None,
            int(event.is_active),
            UtcDateTime(event.created_at).iso,
            UtcDateTime(event.updated_at).iso,
        )

    @staticmethod
    def _list_columns(editable_list: EditableList) -> tuple[Any, ...]:
        return (
            editable_list.name,
            editable_list.description,
            editable_list.visibility.value,
            editable_list.edit_policy.value,
            int(editable_list.is_active),
            UtcDateTime(editable_list.created_at).iso,
            UtcDateTime(editable_list.updated_at).iso,
        )

    def _row_to_event(self, row: dict[str, Any]) -> Event:
        fence = None
        if row["fence_latitude"] is not None and row["fence_longitude"] is not None:
            fence = GeoFence(
                latitude=row["fence_latitude"],
                longitude=row["fence_longitude"],
                radius_m=row["fence_radius_m"],
            )
        window = None
        if row["starts_at"] is not None or row["ends_at"] is not None:
            window = TimeWindow(
                starts_at=UtcDateTime.from_optional_iso(row["starts_at"]),
                ends_at=UtcDateTime.from_optional_iso(row["ends_at"]),
            )
        return Event(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            visibility=Visibility(row["visibility"]),
            access_tier=AccessTier(row["access_tier"]),
            geo_fence=fence,
            time_window=window,
            is_active=bool(row["is_active"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )

    def _row_to_list(self, row: dict[str, Any]) -> EditableList:
        return EditableList(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            visibility=Visibility(row["visibility"]),
            edit_policy=EditPolicy(row["edit_policy"]),
            is_active=bool(row["is_active"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )


class SQLiteInvitationRepository(InvitationRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def add(self, invitation: Invitation) -> Invitation:
        try:
            await self._db.execute(
                """
                INSERT INTO invitations (
                    id, resource_id, resource_kind, invitee_id, grantor_id,
                    role, state, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invitation.id,
                    invitation.resource_id,
                    invitation.resource_kind.value,
                    invitation.invitee_id,
                    invitation.grantor_id,
                    invitation.role.value,
                    invitation.state.value,
                    UtcDateTime(invitation.created_at).iso,
                    UtcDateTime(invitation.updated_at).iso,
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise ConflictError("Invitation", ErrorMessages.INVITATION_EXISTS) from e
        return invitation

    async def get(self, invitation_id: str) -> Invitation | None:
        row = await self._db.fetch_one("SELECT * FROM invitations WHERE id = ?", (invitation_id,))
        return self._row_to_invitation(row) if row else None

    async def get_for(self, resource_id: str, invitee_id: str) -> Invitation | None:
        row = await self._db.fetch_one(
            "SELECT * FROM invitations WHERE resource_id = ? AND invitee_id = ?",
            (resource_id, invitee_id),
        )
        return self._row_to_invitation(row) if row else None

    async def update(self, invitation: Invitation) -> bool:
        cursor = await self._db.execute(
            """
            UPDATE invitations SET grantor_id = ?, role = ?, state = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                invitation.grantor_id,
                invitation.role.value,
                invitation.state.value,
                UtcDateTime(invitation.updated_at).iso,
                invitation.id,
            ),
        )
        return cursor.rowcount > 0

    async def delete(self, invitation_id: str) -> bool:
        cursor = await self._db.execute("DELETE FROM invitations WHERE id = ?", (invitation_id,))
        return cursor.rowcount > 0

    async def list_for_invitee(
        self, invitee_id: str, state: HandshakeState | None = None
    ) -> list[Invitation]:
        if state is None:
            rows = await self._db.fetch_all(
                "SELECT * FROM invitations WHERE invitee_id = ? ORDER BY created_at DESC",
                (invitee_id,),
            )
        else:
            rows = await self._db.fetch_all(
                """
                SELECT * FROM invitations
                WHERE invitee_id = ? AND state = ?
                ORDER BY created_at DESC
                """,
                (invitee_id, state.value),
            )
        return [self._row_to_invitation(row) for row in rows]

    async def list_for_resource(self, resource_id: str) -> list[Invitation]:
        rows = await self._db.fetch_all(
            "SELECT * FROM invitations WHERE resource_id = ? ORDER BY created_at ASC",
            (resource_id,),
        )
        return [self._row_to_invitation(row) for row in rows]

    def _row_to_invitation(self, row: dict[str, Any]) -> Invitation:
        return Invitation(
            id=row["id"],
            resource_id=row["resource_id"],
            resource_kind=ResourceKind(row["resource_kind"]),
            invitee_id=row["invitee_id"],
            grantor_id=row["grantor_id"],
            role=CollaboratorRole(row["role"]),
            state=HandshakeState(row["state"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )
