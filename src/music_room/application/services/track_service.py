"""Track Application Service - adding, removing, playing and moving tracks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.entities import Track
from ...domain.resources.entities import EditableList, Resource
from ...domain.shared.constants import LimitConstants
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.enums import ResourceKind
from ...domain.shared.events import TrackAdded, TrackPlayed, TrackRemoved
from ...domain.shared.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidOperationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.voting.services import RankingDomainService

if TYPE_CHECKING:
    from ...domain.access.value_objects import Principal
    from ...domain.music.repository import TrackRepository
    from ...domain.music.value_objects import TrackDraft
    from ...domain.shared.events import EventBus
    from ..interfaces.transactions import TransactionManager
    from .access_guard import AccessGuard
    from .ranking_service import RankingService

logger = logging.getLogger(__name__)


class TrackService:
    """Track lifecycle inside events and editable lists.

    Event tracks are ranked by votes; list tracks keep the order their
    editors give them. Either way positions are rewritten in the same
    transaction as the change.
    """

    def __init__(
        self,
        *,
        transactions: TransactionManager,
        track_repository: TrackRepository,
        access_guard: AccessGuard,
        ranking_service: RankingService,
        event_bus: EventBus,
        max_tracks_per_resource: int = LimitConstants.DEFAULT_MAX_TRACKS_PER_RESOURCE,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._tracks = track_repository
        self._guard = access_guard
        self._ranking = ranking_service
        self._event_bus = event_bus
        self._max_tracks = max_tracks_per_resource
        self._clock = clock

    async def add_track(self, principal: Principal, resource_id: str, draft: TrackDraft) -> Track:
        """Add a candidate track.

        Anyone who can see an event may suggest tracks for it; lists require
        edit rights.

        Raises:
            InvalidArgumentError: If the draft has no media reference.
            EntityNotFoundError: If the resource does not exist.
            ForbiddenError: If the principal may not add here.
            InvalidOperationError: If the resource is full.
        """
        if not draft.has_media:
            raise InvalidArgumentError(ErrorMessages.NO_MEDIA_REFERENCE, field="video_id")

        async with self._tx.transaction():
            resource = await self._guard.load(resource_id)
            if resource.kind is ResourceKind.EVENT:
                await self._guard.require_access(resource, principal)
            else:
                await self._guard.require_edit(resource, principal)

            if await self._tracks.count_for_resource(resource.id) >= self._max_tracks:
                raise InvalidOperationError(
                    "add track",
                    "full",
                    ErrorMessages.RESOURCE_FULL.format(
                        kind=resource.kind.value, limit=self._max_tracks
                    ),
                )

            track = Track.from_draft(
                draft, resource.id, resource.kind, principal.account_id, self._clock()
            )
            track = await self._tracks.add(track)
            ranked = await self._ranking.recompute(resource)

        logger.info(LogTemplates.TRACK_ADDED, track.id, resource.kind.value, resource.id)
        await self._event_bus.publish(
            TrackAdded(resource_id=resource.id, track_id=track.id, added_by=principal.account_id)
        )
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))
        return next((t for t in ranked if t.id == track.id), track)

    async def remove_track(self, principal: Principal, track_id: str) -> None:
        """Remove a track and its votes.

        Event tracks may be removed by the host or by whoever added them;
        list tracks by anyone who may edit the list.
        """
        async with self._tx.transaction():
            track, resource = await self._load(track_id)
            if resource.kind is ResourceKind.EVENT:
                await self._require_host_or_adder(resource, track, principal)
            else:
                await self._guard.require_edit(resource, principal)

            await self._tracks.delete(track.id)
            ranked = await self._ranking.recompute(resource)

        logger.info(LogTemplates.TRACK_REMOVED, track.id, resource.id)
        await self._event_bus.publish(TrackRemoved(resource_id=resource.id, track_id=track.id))
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))

    async def mark_played(self, principal: Principal, track_id: str) -> Track:
        """Move a track to ``played``. Owner only; playing twice is a no-op."""
        async with self._tx.transaction():
            track, resource = await self._load(track_id)
            self._guard.require_manage(resource, principal, "mark tracks as played")
            if track.is_played:
                return track
            await self._tracks.mark_played(track.id)
            ranked = await self._ranking.recompute(resource)
            played = await self._tracks.get(track.id)

        logger.info(LogTemplates.TRACK_PLAYED, track.id)
        await self._event_bus.publish(TrackPlayed(resource_id=resource.id, track_id=track.id))
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))
        return played or track

    async def move_track(self, principal: Principal, track_id: str, new_position: int) -> list[Track]:
        """Move an unplayed list track to ``new_position`` (1-based).

        Returns:
            The list's unplayed tracks in their new order.

        Raises:
            InvalidOperationError: If the track is not in an editable list or
                was already played.
            InvalidArgumentError: If ``new_position`` is out of range.
        """
        async with self._tx.transaction():
            track, resource = await self._load(track_id)
            if not isinstance(resource, EditableList):
                raise InvalidOperationError(
                    "move track", resource.kind.value, ErrorMessages.TRACK_NOT_IN_LIST
                )
            await self._guard.require_edit(resource, principal)
            if track.is_played:
                raise InvalidOperationError(
                    "move track",
                    track.state.value,
                    ErrorMessages.TRACK_ALREADY_PLAYED.format(title=track.title),
                )

            ordered = RankingDomainService.rank_manual(
                await self._tracks.list_for_resource(resource.id)
            )
            moved = RankingDomainService.move(ordered, track.id, new_position)
            ranked = await self._ranking.apply_order(moved)

        logger.info(LogTemplates.TRACK_MOVED, track.id, new_position)
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))
        return ranked

    async def _load(self, track_id: str) -> tuple[Track, Resource]:
        track = await self._tracks.get(track_id)
        if track is None:
            raise EntityNotFoundError("Track", track_id)
        return track, await self._guard.load(track.resource_id)

    async def _require_host_or_adder(
        self, resource: Resource, track: Track, principal: Principal
    ) -> None:
        if self._guard.evaluator.can_manage(resource, principal):
            return
        if track.was_added_by(principal.account_id):
            await self._guard.require_access(resource, principal)
            return
        raise ForbiddenError(
            "remove track", ErrorMessages.NOT_OWNER.format(action="remove other people's tracks")
        )
