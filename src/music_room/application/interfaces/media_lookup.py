"""
Media Lookup Interface

Port interface for third-party track search.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from ...domain.music.value_objects import TrackDraft
from ...domain.shared.types import DurationSeconds, HttpUrlStr, NonEmptyStr, TrackTitleStr


class MediaCandidate(BaseModel):
    """One search hit returned by a media lookup."""

    model_config = ConfigDict(frozen=True)

    external_id: NonEmptyStr
    title: TrackTitleStr
    author: NonEmptyStr = "Unknown Artist"
    duration_seconds: DurationSeconds = 0
    artwork_url: HttpUrlStr | None = None

    def to_draft(self, album: str | None = None) -> TrackDraft:
        """Turn the hit into a draft whose primary media reference is the external id."""
        return TrackDraft(
            title=self.title,
            artist=self.author,
            album=album,
            duration_seconds=self.duration_seconds,
            artwork_url=self.artwork_url,
            video_id=self.external_id,
        )


class MediaLookup(ABC):
    """Abstract interface for searching playable media.

    Implementations talk to a video or catalog provider; the core never
    depends on which one.
    """

    @abstractmethod
    async def search(self, query: str, limit: int = 10) -> list[MediaCandidate]:
        """Search for tracks matching a free-text query.

        Args:
            query: What the participant typed.
            limit: Maximum number of candidates to return.

        Returns:
            Candidates ordered by the provider's relevance.
        """
        ...
