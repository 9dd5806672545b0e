"""
Voting Domain Services

Tally and rank computation. Both are pure functions of the stored votes and
tracks, so the result never depends on the order in which votes arrived.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from music_room.domain.music.entities import Track
from music_room.domain.shared.exceptions import InvalidArgumentError
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.voting.value_objects import VoteDirection


class RankingDomainService:
    """Domain service for tally and ranking rules.

    Event tracks are ranked by tally descending, then by the time they were
    added, then by insertion sequence. Editable lists keep the order their
    editors gave them. Only unplayed tracks are ranked; played tracks keep
    whatever position they had.
    """

    @classmethod
    def compute_tally(cls, directions: Iterable[VoteDirection]) -> int:
        """Up votes minus down votes, floored at zero."""
        return max(0, sum(direction.weight for direction in directions))

    @classmethod
    def rank_by_votes(cls, tracks: Iterable[Track]) -> list[Track]:
        unplayed = [track for track in tracks if not track.is_played]
        return sorted(unplayed, key=lambda t: (-t.tally, t.added_at, t.sequence))

    @classmethod
    def rank_manual(cls, tracks: Iterable[Track]) -> list[Track]:
        # Freshly added tracks have no position yet and go to the end.
        unplayed = [track for track in tracks if not track.is_played]
        return sorted(
            unplayed,
            key=lambda t: (t.position == 0, t.position, t.added_at, t.sequence),
        )

    @classmethod
    def assign_positions(cls, ordered: Sequence[Track]) -> list[tuple[str, int]]:
        """Dense 1..N positions for an already ordered sequence."""
        return [(track.id, index) for index, track in enumerate(ordered, start=1)]

    @classmethod
    def move(cls, ordered: Sequence[Track], track_id: str, new_position: int) -> list[Track]:
        """Return ``ordered`` with ``track_id`` moved to 1-based ``new_position``.

        Raises:
            InvalidArgumentError: If the position is outside 1..N.
        """
        count = len(ordered)
        if not 1 <= new_position <= count:
            raise InvalidArgumentError(
                ErrorMessages.INVALID_MOVE_POSITION.format(count=count), field="new_position"
            )
        remaining = [track for track in ordered if track.id != track_id]
        moving = next(track for track in ordered if track.id == track_id)
        remaining.insert(new_position - 1, moving)
        return remaining
