"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from music_room.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    TrackTitleStr,
)


class TrackState(StrEnum):
    """Track lifecycle. ``unplayed`` moves to ``played`` and never back."""

    UNPLAYED = "unplayed"
    PLAYED = "played"


def _pick_media(video_id: str | None, catalog_uri: str | None) -> str | None:
    # The video id is the primary reference and wins when both are set.
    for candidate in (video_id, catalog_uri):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


class TrackDraft(BaseModel):
    """Caller-supplied description of a track to add."""

    model_config = ConfigDict(frozen=True)

    title: TrackTitleStr
    artist: NonEmptyStr = "Unknown Artist"
    album: str | None = None
    duration_seconds: DurationSeconds = 0
    artwork_url: HttpUrlStr | None = None
    video_id: str | None = None
    catalog_uri: str | None = None

    @property
    def media_reference(self) -> str | None:
        return _pick_media(self.video_id, self.catalog_uri)

    @property
    def has_media(self) -> bool:
        return self.media_reference is not None
