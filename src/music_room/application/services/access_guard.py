"""Loads resources and memberships, then enforces access decisions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.resources.entities import Event, Invitation, Resource
from ...domain.shared.exceptions import EntityNotFoundError, ForbiddenError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.access.services import AccessEvaluator
    from ...domain.access.value_objects import Principal
    from ...domain.resources.repository import InvitationRepository, ResourceRepository

logger = logging.getLogger(__name__)


class AccessGuard:
    """Turns :class:`AccessEvaluator` answers into ``ForbiddenError``.

    Every check re-reads state; call it inside the same transaction as the
    mutation it protects.
    """

    def __init__(
        self,
        *,
        resource_repository: ResourceRepository,
        invitation_repository: InvitationRepository,
        evaluator: AccessEvaluator,
    ) -> None:
        self._resources = resource_repository
        self._invitations = invitation_repository
        self._evaluator = evaluator

    @property
    def evaluator(self) -> AccessEvaluator:
        return self._evaluator

    async def load(self, resource_id: str) -> Resource:
        resource = await self._resources.get(resource_id)
        if resource is None:
            raise EntityNotFoundError("Resource", resource_id)
        return resource

    async def invitation_for(self, resource: Resource, principal: Principal) -> Invitation | None:
        if resource.is_owned_by(principal.account_id):
            return None
        return await self._invitations.get_for(resource.id, principal.account_id)

    async def require_access(self, resource: Resource, principal: Principal) -> None:
        invitation = await self.invitation_for(resource, principal)
        if not self._evaluator.can_access(resource, principal, invitation):
            self._deny(resource, principal, "access")

    async def require_vote(
        self, resource: Resource, principal: Principal, inside_fence: bool | None = None
    ) -> None:
        invitation = await self.invitation_for(resource, principal)
        if not self._evaluator.can_vote(resource, principal, invitation, inside_fence):
            message = None if isinstance(resource, Event) else ErrorMessages.LIST_NOT_VOTABLE
            self._deny(resource, principal, "vote in", message)

    async def require_edit(self, resource: Resource, principal: Principal) -> None:
        invitation = await self.invitation_for(resource, principal)
        if not self._evaluator.can_edit(resource, principal, invitation):
            self._deny(resource, principal, "edit")

    def require_manage(self, resource: Resource, principal: Principal, action: str) -> None:
        if not self._evaluator.can_manage(resource, principal):
            self._deny(resource, principal, action, ErrorMessages.NOT_OWNER.format(action=action))

    @staticmethod
    def _deny(
        resource: Resource, principal: Principal, action: str, message: str | None = None
    ) -> None:
        logger.info(
            LogTemplates.ACCESS_DENIED, principal.account_id, action, resource.kind.value, resource.id
        )
        if message is None and not resource.is_active:
            message = ErrorMessages.RESOURCE_INACTIVE.format(kind=resource.kind.value)
        raise ForbiddenError(f"{action} {resource.kind.value}", message)
