"""Resource Application Service - creating and managing events and lists."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.resources.entities import EditableList, Event, Resource
from ...domain.resources.value_objects import AccessTier, EditPolicy, GeoFence, TimeWindow
from ...domain.shared.constants import LimitConstants
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.enums import Visibility
from ...domain.shared.events import ResourceStatusChanged
from ...domain.shared.exceptions import EntityNotFoundError, InvalidOperationError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.access.value_objects import Principal
    from ...domain.resources.repository import ResourceRepository
    from ...domain.shared.events import EventBus
    from ..interfaces.transactions import TransactionManager
    from .access_guard import AccessGuard
    from .resource_models import EventChanges, ListChanges

logger = logging.getLogger(__name__)


class ResourceService:
    def __init__(
        self,
        *,
        transactions: TransactionManager,
        resource_repository: ResourceRepository,
        access_guard: AccessGuard,
        event_bus: EventBus,
        default_fence_radius_m: int = LimitConstants.DEFAULT_FENCE_RADIUS_M,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._resources = resource_repository
        self._guard = access_guard
        self._event_bus = event_bus
        self._default_radius = default_fence_radius_m
        self._clock = clock

    async def create_event(
        self,
        principal: Principal,
        name: str,
        *,
        description: str = "",
        visibility: Visibility = Visibility.PUBLIC,
        access_tier: AccessTier = AccessTier.FREE,
        geo_fence: GeoFence | None = None,
        time_window: TimeWindow | None = None,
    ) -> Event:
        now = self._clock()
        event = Event(
            owner_id=principal.account_id,
            name=name,
            description=description,
            visibility=visibility,
            access_tier=access_tier,
            geo_fence=geo_fence,
            time_window=time_window,
            created_at=now,
            updated_at=now,
        )
        async with self._tx.transaction():
            await self._resources.add(event)
        logger.info(LogTemplates.RESOURCE_CREATED, event.kind.value, event.id, principal.account_id)
        return event

    async def create_list(
        self,
        principal: Principal,
        name: str,
        *,
        description: str = "",
        visibility: Visibility = Visibility.PUBLIC,
        edit_policy: EditPolicy = EditPolicy.OPEN,
    ) -> EditableList:
        now = self._clock()
        editable_list = EditableList(
            owner_id=principal.account_id,
            name=name,
            description=description,
            visibility=visibility,
            edit_policy=edit_policy,
            created_at=now,
            updated_at=now,
        )
        async with self._tx.transaction():
            await self._resources.add(editable_list)
        logger.info(
            LogTemplates.RESOURCE_CREATED,
            editable_list.kind.value,
            editable_list.id,
            principal.account_id,
        )
        return editable_list

    def fence_at(self, latitude: float, longitude: float, radius_m: int | None = None) -> GeoFence:
        """Build a fence using the configured default radius."""
        return GeoFence(
            latitude=latitude, longitude=longitude, radius_m=radius_m or self._default_radius
        )

    async def update_event(self, principal: Principal, event_id: str, changes: EventChanges) -> Event:
        """Apply a host's changes, re-validating the whole event."""
        async with self._tx.transaction():
            event = await self._resources.get_event(event_id)
            if event is None:
                raise EntityNotFoundError("Event", event_id)
            self._guard.require_manage(event, principal, "update this event")
            updated = Event.model_validate(
                {
                    **event.model_dump(),
                    **changes.model_dump(exclude_unset=True),
                    "updated_at": self._clock(),
                }
            )
            await self._resources.update(updated)
        logger.info(LogTemplates.RESOURCE_UPDATED, updated.kind.value, updated.id)
        return updated

    async def update_list(
        self, principal: Principal, list_id: str, changes: ListChanges
    ) -> EditableList:
        async with self._tx.transaction():
            editable_list = await self._resources.get_list(list_id)
            if editable_list is None:
                raise EntityNotFoundError("EditableList", list_id)
            self._guard.require_manage(editable_list, principal, "update this list")
            updated = EditableList.model_validate(
                {
                    **editable_list.model_dump(),
                    **changes.model_dump(exclude_unset=True),
                    "updated_at": self._clock(),
                }
            )
            await self._resources.update(updated)
        logger.info(LogTemplates.RESOURCE_UPDATED, updated.kind.value, updated.id)
        return updated

    async def deactivate(self, principal: Principal, resource_id: str) -> Resource:
        return await self._set_active(principal, resource_id, False)

    async def reactivate(self, principal: Principal, resource_id: str) -> Resource:
        return await self._set_active(principal, resource_id, True)

    async def get_resource(self, principal: Principal, resource_id: str) -> Resource:
        async with self._tx.snapshot():
            resource = await self._guard.load(resource_id)
            await self._guard.require_access(resource, principal)
            return resource

    async def list_public_events(
        self, limit: int = LimitConstants.DEFAULT_PUBLIC_EVENTS_LIMIT
    ) -> list[Event]:
        async with self._tx.snapshot():
            return await self._resources.list_public_events(limit)

    async def list_owned(self, principal: Principal) -> list[Resource]:
        async with self._tx.snapshot():
            return await self._resources.list_owned(principal.account_id)

    async def _set_active(self, principal: Principal, resource_id: str, is_active: bool) -> Resource:
        action = "reactivate" if is_active else "deactivate"
        async with self._tx.transaction():
            resource = await self._guard.load(resource_id)
            self._guard.require_manage(resource, principal, action)
            if resource.is_active is is_active:
                raise InvalidOperationError(action, "active" if is_active else "inactive")
            updated = resource.with_active(is_active, self._clock())
            await self._resources.update(updated)

        logger.info(LogTemplates.RESOURCE_STATUS_CHANGED, updated.kind.value, updated.id, is_active)
        await self._event_bus.publish(
            ResourceStatusChanged(
                resource_id=updated.id, resource_kind=updated.kind, is_active=is_active
            )
        )
        return updated
