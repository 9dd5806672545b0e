"""Ranking Application Service - keeps tallies and positions in step with votes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.entities import Track
from ...domain.shared.enums import ResourceKind
from ...domain.shared.events import TrackRankingChanged
from ...domain.shared.messages import LogTemplates
from ...domain.voting.services import RankingDomainService

if TYPE_CHECKING:
    from ...domain.music.repository import TrackRepository
    from ...domain.resources.entities import Resource
    from ...domain.voting.repository import VoteRepository
    from ..interfaces.transactions import TransactionManager

logger = logging.getLogger(__name__)


class RankingService:
    """Recomputes derived track state.

    Both methods join the caller's write transaction, so the derived state is
    committed together with the vote or track change that caused it.
    """

    def __init__(
        self,
        *,
        transactions: TransactionManager,
        track_repository: TrackRepository,
        vote_repository: VoteRepository,
    ) -> None:
        self._tx = transactions
        self._tracks = track_repository
        self._votes = vote_repository

    async def refresh_tally(self, track_id: str) -> int:
        async with self._tx.transaction():
            directions = await self._votes.directions_for_track(track_id)
            tally = RankingDomainService.compute_tally(directions)
            if not await self._tracks.set_tally(track_id, tally):
                logger.warning(LogTemplates.TRACK_VANISHED, track_id)
        return tally

    async def recompute(self, resource: Resource) -> list[Track]:
        """Rewrite dense positions for the unplayed tracks of ``resource``.

        Returns:
            The unplayed tracks in their new order, positions filled in.
        """
        async with self._tx.transaction():
            tracks = await self._tracks.list_for_resource(resource.id)
            if resource.kind is ResourceKind.EVENT:
                ordered = RankingDomainService.rank_by_votes(tracks)
            else:
                ordered = RankingDomainService.rank_manual(tracks)
            ranked = await self.apply_order(ordered)

        logger.debug(LogTemplates.RANKING_RECOMPUTED, resource.kind.value, resource.id, len(ranked))
        return ranked

    async def apply_order(self, ordered: list[Track]) -> list[Track]:
        """Persist ``ordered`` as positions 1..N, writing only what changed."""
        positions = RankingDomainService.assign_positions(ordered)
        changed = [
            (track_id, position)
            for track, (track_id, position) in zip(ordered, positions, strict=True)
            if track.position != position
        ]
        if changed:
            async with self._tx.transaction():
                await self._tracks.set_positions(changed)
        return [
            track.model_copy(update={"position": position})
            for track, (_, position) in zip(ordered, positions, strict=True)
        ]

    @staticmethod
    def ranking_event(resource: Resource, ranked: list[Track]) -> TrackRankingChanged:
        return TrackRankingChanged(
            resource_id=resource.id,
            resource_kind=resource.kind,
            ranking=tuple(track.id for track in ranked),
        )
