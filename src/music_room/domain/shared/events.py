"""Domain event bus for publishing and subscribing to events.

Events are published after the triggering transaction commits so connected
clients can refresh. Delivery is best-effort: the store is already consistent
when a handler runs, and a failing handler never affects the mutation.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.enums import HandshakeState, ResourceKind
from music_room.domain.shared.types import NonEmptyStr, NonNegativeInt, UtcDatetimeField

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


# === Resource Events ===


class ResourceStatusChanged(DomainEvent):
    resource_id: str = ""
    resource_kind: ResourceKind = ResourceKind.EVENT
    is_active: bool = True


class MembershipChanged(DomainEvent):
    resource_id: str = ""
    invitee_id: str = ""
    state: HandshakeState | None = None


# === Track / Ranking Events ===


class TrackAdded(DomainEvent):
    resource_id: str = ""
    track_id: str = ""
    added_by: str = ""


class TrackRemoved(DomainEvent):
    resource_id: str = ""
    track_id: str = ""


class TrackPlayed(DomainEvent):
    resource_id: str = ""
    track_id: str = ""


class TrackRankingChanged(DomainEvent):
    resource_id: str = ""
    resource_kind: ResourceKind = ResourceKind.EVENT
    ranking: tuple[str, ...] = ()


# === Vote Events ===


class VoteCast(DomainEvent):
    resource_id: str = ""
    track_id: str = ""
    account_id: str = ""
    direction: str = ""
    tally: NonNegativeInt = 0


class VoteRetracted(DomainEvent):
    resource_id: str = ""
    track_id: str = ""
    account_id: str = ""
    tally: NonNegativeInt = 0


# === Relationship Events ===


class RelationshipRequested(DomainEvent):
    request_id: str = ""
    requester_id: str = ""
    recipient_id: str = ""


class RelationshipEstablished(DomainEvent):
    request_id: str = ""
    account_ids: tuple[str, str] = ("", "")


# === Event Bus ===


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.__name__)

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            logger.debug("No handlers for %s", event_type.__name__)
            return

        logger.debug("Publishing %s to %d handlers", event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception("Error in handler for %s: %s", event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in list(handlers):
                tg.create_task(safe_call(handler))

    async def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")
