"""Invitation Application Service - one-sided membership in events and lists."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.resources.entities import Invitation
from ...domain.resources.value_objects import CollaboratorRole
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.enums import HandshakeState
from ...domain.shared.events import MembershipChanged
from ...domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.access.value_objects import Principal
    from ...domain.accounts.repository import AccountRepository
    from ...domain.resources.repository import InvitationRepository
    from ...domain.shared.events import EventBus
    from ..interfaces.transactions import TransactionManager
    from .access_guard import AccessGuard

logger = logging.getLogger(__name__)


class InvitationService:
    """Manages invitations: owner-granted or self-service on public resources.

    An accepted invitation is what lets a principal into a private resource
    and, for lists with a collaborator role, what lets them edit it.
    """

    def __init__(
        self,
        *,
        transactions: TransactionManager,
        account_repository: AccountRepository,
        invitation_repository: InvitationRepository,
        access_guard: AccessGuard,
        event_bus: EventBus,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._accounts = account_repository
        self._invitations = invitation_repository
        self._guard = access_guard
        self._event_bus = event_bus
        self._clock = clock

    async def invite(
        self,
        principal: Principal,
        resource_id: str,
        invitee_id: str,
        role: CollaboratorRole = CollaboratorRole.COLLABORATOR,
    ) -> Invitation:
        """Invite ``invitee_id`` to a resource the principal owns.

        A previously declined invitation is reopened instead of duplicated.

        Raises:
            InvalidArgumentError: If the owner invites itself.
            EntityNotFoundError: If the resource or invitee does not exist.
            ForbiddenError: If the principal does not own the resource.
            ConflictError: If a pending or accepted invitation already exists.
        """
        if invitee_id == principal.account_id:
            raise InvalidArgumentError(ErrorMessages.SELF_INVITE, field="invitee_id")

        async with self._tx.transaction():
            resource = await self._guard.load(resource_id)
            self._guard.require_manage(resource, principal, "invite")
            if await self._accounts.get(invitee_id) is None:
                raise EntityNotFoundError("Account", invitee_id)

            now = self._clock()
            existing = await self._invitations.get_for(resource_id, invitee_id)
            if existing is not None:
                if existing.state is not HandshakeState.DECLINED:
                    raise ConflictError("Invitation", ErrorMessages.INVITATION_EXISTS)
                invitation = existing.reopen(principal.account_id, role, now)
                await self._invitations.update(invitation)
                logger.info(LogTemplates.INVITATION_REOPENED, invitation.id)
            else:
                invitation = Invitation(
                    resource_id=resource.id,
                    resource_kind=resource.kind,
                    invitee_id=invitee_id,
                    grantor_id=principal.account_id,
                    role=role,
                    created_at=now,
                    updated_at=now,
                )
                await self._invitations.add(invitation)
                logger.info(
                    LogTemplates.INVITATION_SENT,
                    invitation.id,
                    resource.kind.value,
                    resource.id,
                    invitee_id,
                )

        await self._publish(invitation)
        return invitation

    async def join(self, principal: Principal, resource_id: str) -> Invitation:
        """Self-service accepted membership in an active public resource.

        A self-joined membership carries the viewer role, so it never opens an
        invite-only list for editing. Joining again returns the existing
        accepted invitation. A pending or declined invitation is accepted in
        place and keeps the role the owner granted.

        Raises:
            EntityNotFoundError: If the resource does not exist.
            ForbiddenError: If the resource is private or inactive.
        """
        async with self._tx.transaction():
            resource = await self._guard.load(resource_id)
            if not resource.is_public:
                raise ForbiddenError(f"join {resource.kind.value}", ErrorMessages.JOIN_PRIVATE)
            await self._guard.require_access(resource, principal)

            now = self._clock()
            existing = await self._invitations.get_for(resource_id, principal.account_id)
            if existing is not None and existing.is_accepted:
                return existing
            if existing is not None:
                invitation = existing.model_copy(
                    update={"state": HandshakeState.ACCEPTED, "updated_at": now}
                )
                await self._invitations.update(invitation)
            else:
                invitation = Invitation(
                    resource_id=resource.id,
                    resource_kind=resource.kind,
                    invitee_id=principal.account_id,
                    grantor_id=principal.account_id,
                    role=CollaboratorRole.VIEWER,
                    state=HandshakeState.ACCEPTED,
                    created_at=now,
                    updated_at=now,
                )
                await self._invitations.add(invitation)

        logger.info(
            LogTemplates.RESOURCE_JOINED, principal.account_id, resource.kind.value, resource.id
        )
        await self._publish(invitation)
        return invitation

    async def respond(self, principal: Principal, invitation_id: str, accept: bool) -> Invitation:
        """Accept or decline a pending invitation addressed to the principal.

        Raises:
            EntityNotFoundError: If there is no pending invitation with that id.
            ForbiddenError: If the principal is not the invitee.
        """
        async with self._tx.transaction():
            invitation = await self._invitations.get(invitation_id)
            if invitation is None or not invitation.is_pending:
                raise EntityNotFoundError(
                    "Invitation",
                    invitation_id,
                    ErrorMessages.NO_PENDING_INVITATION.format(invitation_id=invitation_id),
                )
            if invitation.invitee_id != principal.account_id:
                raise ForbiddenError("respond to invitation", ErrorMessages.NOT_INVITEE)
            invitation = invitation.respond(accept, self._clock())
            await self._invitations.update(invitation)

        logger.info(LogTemplates.INVITATION_RESOLVED, invitation.id, invitation.state.value)
        await self._publish(invitation)
        return invitation

    async def revoke(self, principal: Principal, invitation_id: str) -> None:
        """Delete an invitation to a resource the principal owns."""
        async with self._tx.transaction():
            invitation = await self._invitations.get(invitation_id)
            if invitation is None:
                raise EntityNotFoundError("Invitation", invitation_id)
            resource = await self._guard.load(invitation.resource_id)
            self._guard.require_manage(resource, principal, "revoke invitations")
            await self._invitations.delete(invitation_id)

        logger.info(LogTemplates.INVITATION_REVOKED, invitation_id)
        await self._event_bus.publish(
            MembershipChanged(
                resource_id=invitation.resource_id, invitee_id=invitation.invitee_id, state=None
            )
        )

    async def list_received(
        self, account_id: str, state: HandshakeState | None = HandshakeState.PENDING
    ) -> list[Invitation]:
        async with self._tx.snapshot():
            return await self._invitations.list_for_invitee(account_id, state)

    async def list_for_resource(self, principal: Principal, resource_id: str) -> list[Invitation]:
        """Every invitation to a resource; visible to its owner only."""
        async with self._tx.snapshot():
            resource = await self._guard.load(resource_id)
            self._guard.require_manage(resource, principal, "list invitations")
            return await self._invitations.list_for_resource(resource_id)

    async def _publish(self, invitation: Invitation) -> None:
        await self._event_bus.publish(
            MembershipChanged(
                resource_id=invitation.resource_id,
                invitee_id=invitation.invitee_id,
                state=invitation.state,
            )
        )
