"""Relationship Application Service - friend requests and connections."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.enums import HandshakeState
from ...domain.shared.events import RelationshipEstablished, RelationshipRequested
from ...domain.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.social.entities import Relationship, RelationshipRequest, ResolveOutcome
from ...domain.social.services import RelationshipDomainService

if TYPE_CHECKING:
    from ...domain.access.value_objects import Principal
    from ...domain.accounts.repository import AccountRepository
    from ...domain.shared.events import EventBus
    from ...domain.social.repository import RelationshipRepository
    from ..interfaces.transactions import TransactionManager

logger = logging.getLogger(__name__)


class RelationshipService:
    """Drives the request/accept handshake that produces symmetric connections.

    Accepting a request writes both directed edges in the same transaction as
    the state change, so a connection is never visible from one side only.
    Tearing a connection down is asymmetric: each side removes its own edge.
    """

    def __init__(
        self,
        *,
        transactions: TransactionManager,
        account_repository: AccountRepository,
        relationship_repository: RelationshipRepository,
        event_bus: EventBus,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._accounts = account_repository
        self._relationships = relationship_repository
        self._event_bus = event_bus
        self._clock = clock

    async def send_request(self, principal: Principal, recipient_id: str) -> RelationshipRequest:
        """Open a pending request from ``principal`` to ``recipient_id``.

        Raises:
            InvalidArgumentError: If the principal targets itself.
            EntityNotFoundError: If the recipient does not exist.
            ConflictError: If a request is already pending or the principal
                already holds a connection to the recipient.
        """
        requester_id = principal.account_id
        RelationshipDomainService.validate_pair(requester_id, recipient_id)

        async with self._tx.transaction():
            if await self._accounts.get(recipient_id) is None:
                raise EntityNotFoundError("Account", recipient_id)
            if await self._relationships.has_edge(requester_id, recipient_id):
                raise ConflictError("Relationship", ErrorMessages.ALREADY_CONNECTED)
            if await self._relationships.find_pending(requester_id, recipient_id) is not None:
                raise ConflictError("RelationshipRequest", ErrorMessages.REQUEST_ALREADY_PENDING)

            now = self._clock()
            request = RelationshipRequest(
                requester_id=requester_id,
                recipient_id=recipient_id,
                created_at=now,
                updated_at=now,
            )
            await self._relationships.add_request(request)

        logger.info(LogTemplates.REQUEST_SENT, request.id, requester_id, recipient_id)
        await self._event_bus.publish(
            RelationshipRequested(
                request_id=request.id, requester_id=requester_id, recipient_id=recipient_id
            )
        )
        return request

    async def resolve(
        self, principal: Principal, request_id: str, outcome: ResolveOutcome | str
    ) -> RelationshipRequest:
        """Accept or decline a request addressed to ``principal``.

        Accepting an already accepted request succeeds again and re-ensures
        both edges; this keeps retried or concurrent accepts harmless.

        Raises:
            InvalidArgumentError: If ``outcome`` is not accept/decline.
            EntityNotFoundError: If there is no pending request with that id.
            ForbiddenError: If ``principal`` is not the recipient.
        """
        outcome = self._parse_outcome(outcome)
        edges_inserted = 0

        async with self._tx.transaction():
            request = await self._relationships.get_request(request_id)
            if request is None:
                raise EntityNotFoundError(
                    "RelationshipRequest",
                    request_id,
                    ErrorMessages.NO_PENDING_REQUEST.format(request_id=request_id),
                )
            if request.recipient_id != principal.account_id:
                raise ForbiddenError("resolve request", ErrorMessages.NOT_REQUEST_RECIPIENT)

            now = self._clock()
            if request.state is HandshakeState.ACCEPTED and outcome is ResolveOutcome.ACCEPT:
                edges_inserted = await self._relationships.add_edges(
                    RelationshipDomainService.edges_for(request, now)
                )
                logger.info(LogTemplates.REQUEST_REACCEPTED, request.id)
                resolved = request
            elif not request.is_pending:
                raise EntityNotFoundError(
                    "RelationshipRequest",
                    request_id,
                    ErrorMessages.NO_PENDING_REQUEST.format(request_id=request_id),
                )
            else:
                resolved = request.resolve(outcome, now)
                await self._relationships.update_state(request.id, resolved.state, now)
                if outcome is ResolveOutcome.ACCEPT:
                    edges_inserted = await self._relationships.add_edges(
                        RelationshipDomainService.edges_for(request, now)
                    )
                    logger.info(LogTemplates.REQUEST_ACCEPTED, request.id)
                else:
                    logger.info(LogTemplates.REQUEST_DECLINED, request.id)

        if edges_inserted:
            await self._event_bus.publish(
                RelationshipEstablished(
                    request_id=resolved.id,
                    account_ids=(resolved.requester_id, resolved.recipient_id),
                )
            )
        return resolved

    async def cancel_request(self, principal: Principal, request_id: str) -> None:
        """Withdraw a pending request the principal sent."""
        async with self._tx.transaction():
            request = await self._relationships.get_request(request_id)
            if request is None or not request.is_pending:
                raise EntityNotFoundError(
                    "RelationshipRequest",
                    request_id,
                    ErrorMessages.NO_PENDING_REQUEST.format(request_id=request_id),
                )
            if request.requester_id != principal.account_id:
                raise ForbiddenError("cancel request", ErrorMessages.NOT_REQUEST_REQUESTER)
            await self._relationships.delete_request(request_id)
        logger.info(LogTemplates.REQUEST_CANCELLED, request_id)

    async def list_connections(self, account_id: str) -> list[Relationship]:
        async with self._tx.snapshot():
            return await self._relationships.list_edges(account_id)

    async def list_received(self, account_id: str) -> list[RelationshipRequest]:
        async with self._tx.snapshot():
            return await self._relationships.list_received(account_id)

    async def list_sent(self, account_id: str) -> list[RelationshipRequest]:
        async with self._tx.snapshot():
            return await self._relationships.list_sent(account_id)

    async def remove_connection(self, principal: Principal, peer_id: str) -> None:
        """Delete the principal's own edge to ``peer_id``; the peer's edge stays."""
        async with self._tx.transaction():
            removed = await self._relationships.delete_edge(principal.account_id, peer_id)
        if not removed:
            raise EntityNotFoundError("Relationship", peer_id)
        logger.info(LogTemplates.CONNECTION_REMOVED, principal.account_id, peer_id)

    @staticmethod
    def _parse_outcome(outcome: ResolveOutcome | str) -> ResolveOutcome:
        if isinstance(outcome, ResolveOutcome):
            return outcome
        try:
            return ResolveOutcome(str(outcome).strip().lower())
        except ValueError:
            raise InvalidArgumentError(ErrorMessages.INVALID_OUTCOME, field="outcome") from None
