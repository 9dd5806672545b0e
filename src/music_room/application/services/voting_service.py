"""Voting Application Service - casting votes and reading the ranking."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.entities import Track
from ...domain.resources.entities import Event, Resource
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.events import VoteCast, VoteRetracted
from ...domain.shared.exceptions import EntityNotFoundError, InvalidOperationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.voting.entities import Vote
from ...domain.voting.value_objects import VoteDirection

if TYPE_CHECKING:
    from ...domain.access.value_objects import Principal
    from ...domain.music.repository import TrackRepository
    from ...domain.shared.events import EventBus
    from ...domain.voting.repository import VoteRepository
    from ..interfaces.geolocation import GeoFenceChecker
    from ..interfaces.transactions import TransactionManager
    from .access_guard import AccessGuard
    from .ranking_service import RankingService

logger = logging.getLogger(__name__)

Coordinates = tuple[float, float]


class VotingService:
    """Records up/down votes and keeps the event ranking current.

    A vote, the tally it changes and the re-ranked positions are written in
    one transaction, so readers never observe a tally that disagrees with
    the stored votes.
    """

    def __init__(
        self,
        *,
        transactions: TransactionManager,
        track_repository: TrackRepository,
        vote_repository: VoteRepository,
        access_guard: AccessGuard,
        ranking_service: RankingService,
        event_bus: EventBus,
        geo_fence_checker: GeoFenceChecker | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._tx = transactions
        self._tracks = track_repository
        self._votes = vote_repository
        self._guard = access_guard
        self._ranking = ranking_service
        self._event_bus = event_bus
        self._geo = geo_fence_checker
        self._clock = clock

    async def cast_vote(
        self,
        principal: Principal,
        track_id: str,
        direction: VoteDirection | str,
        inside_fence: bool | None = None,
        location: Coordinates | None = None,
    ) -> Track:
        """Cast or replace the principal's vote on a track.

        Args:
            principal: The voter.
            track_id: Track being voted on.
            direction: ``up`` or ``down``.
            inside_fence: Caller's answer to "is the voter inside the event's
                geo-fence". Takes precedence over ``location``.
            location: Reported (latitude, longitude), checked against the
                fence when no ``inside_fence`` answer is given.

        Returns:
            The track with its refreshed tally and position.

        Raises:
            InvalidArgumentError: If ``direction`` is malformed.
            EntityNotFoundError: If the track or its resource is gone.
            ForbiddenError: If the principal may not vote right now.
            InvalidOperationError: If the track was already played.
        """
        direction = VoteDirection.parse(direction)

        async with self._tx.transaction():
            track, resource = await self._load(track_id)
            fence_answer = self._resolve_fence(resource, inside_fence, location)
            await self._guard.require_vote(resource, principal, fence_answer)
            self._ensure_unplayed(track)

            now = self._clock()
            await self._votes.upsert(
                Vote(
                    account_id=principal.account_id,
                    track_id=track.id,
                    resource_id=resource.id,
                    direction=direction,
                    created_at=now,
                    updated_at=now,
                )
            )
            tally = await self._ranking.refresh_tally(track.id)
            ranked = await self._ranking.recompute(resource)

        logger.info(LogTemplates.VOTE_CAST, direction.value, principal.account_id, track.id, tally)
        await self._event_bus.publish(
            VoteCast(
                resource_id=resource.id,
                track_id=track.id,
                account_id=principal.account_id,
                direction=direction.value,
                tally=tally,
            )
        )
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))
        return self._find(ranked, track, tally)

    async def retract_vote(
        self,
        principal: Principal,
        track_id: str,
        inside_fence: bool | None = None,
        location: Coordinates | None = None,
    ) -> Track:
        """Remove the principal's vote on a track.

        Raises:
            EntityNotFoundError: If the track, its resource or the vote is gone.
            ForbiddenError: If the principal may not vote right now.
            InvalidOperationError: If the track was already played.
        """
        async with self._tx.transaction():
            track, resource = await self._load(track_id)
            fence_answer = self._resolve_fence(resource, inside_fence, location)
            await self._guard.require_vote(resource, principal, fence_answer)
            self._ensure_unplayed(track)

            if not await self._votes.delete(principal.account_id, track.id):
                raise EntityNotFoundError("Vote", track.id)
            tally = await self._ranking.refresh_tally(track.id)
            ranked = await self._ranking.recompute(resource)

        logger.info(LogTemplates.VOTE_RETRACTED, principal.account_id, track.id, tally)
        await self._event_bus.publish(
            VoteRetracted(
                resource_id=resource.id,
                track_id=track.id,
                account_id=principal.account_id,
                tally=tally,
            )
        )
        await self._event_bus.publish(self._ranking.ranking_event(resource, ranked))
        return self._find(ranked, track, tally)

    async def ranked_tracks(self, principal: Principal, resource_id: str) -> list[Track]:
        """Unplayed tracks in rank order followed by played tracks."""
        async with self._tx.snapshot():
            resource = await self._guard.load(resource_id)
            await self._guard.require_access(resource, principal)
            return await self._tracks.list_for_resource(resource.id)

    async def my_votes(self, principal: Principal, resource_id: str) -> list[Vote]:
        async with self._tx.snapshot():
            resource = await self._guard.load(resource_id)
            await self._guard.require_access(resource, principal)
            return await self._votes.list_for_account(principal.account_id, resource.id)

    async def _load(self, track_id: str) -> tuple[Track, Resource]:
        track = await self._tracks.get(track_id)
        if track is None:
            raise EntityNotFoundError("Track", track_id)
        return track, await self._guard.load(track.resource_id)

    def _resolve_fence(
        self,
        resource: Resource,
        inside_fence: bool | None,
        location: Coordinates | None,
    ) -> bool | None:
        if inside_fence is not None or location is None or self._geo is None:
            return inside_fence
        if not isinstance(resource, Event) or resource.geo_fence is None:
            return None
        latitude, longitude = location
        return self._geo.is_inside(resource.geo_fence, latitude, longitude)

    @staticmethod
    def _ensure_unplayed(track: Track) -> None:
        if track.is_played:
            raise InvalidOperationError(
                "vote",
                track.state.value,
                ErrorMessages.TRACK_ALREADY_PLAYED.format(title=track.title),
            )

    @staticmethod
    def _find(ranked: list[Track], track: Track, tally: int) -> Track:
        for candidate in ranked:
            if candidate.id == track.id:
                return candidate
        return track.model_copy(update={"tally": tally})
