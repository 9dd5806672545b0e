"""Core domain entities for the music bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from music_room.domain.music.value_objects import TrackDraft, TrackState, _pick_media
from music_room.domain.shared.datetime_utils import utcnow
from music_room.domain.shared.enums import ResourceKind
from music_room.domain.shared.messages import ErrorMessages
from music_room.domain.shared.types import (
    DurationSeconds,
    EntityId,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    RankPositionInt,
    TrackTitleStr,
    UtcDatetimeField,
    new_id,
)


class Track(BaseModel):
    """A candidate track in an event or editable list.

    ``tally`` and ``position`` are derived state owned by the ranking engine;
    nothing else writes them.
    """

    model_config = ConfigDict(frozen=True)

    id: EntityId = Field(default_factory=new_id)
    resource_id: EntityId
    resource_kind: ResourceKind
    title: TrackTitleStr
    artist: NonEmptyStr = "Unknown Artist"
    album: str | None = None
    duration_seconds: DurationSeconds = 0
    artwork_url: HttpUrlStr | None = None
    video_id: str | None = None
    catalog_uri: str | None = None
    added_by: EntityId
    added_at: UtcDatetimeField = Field(default_factory=utcnow)
    sequence: NonNegativeInt = 0
    tally: NonNegativeInt = 0
    position: RankPositionInt = 0
    state: TrackState = TrackState.UNPLAYED

    @model_validator(mode="after")
    def _check_media(self) -> Track:
        if self.media_reference is None:
            raise ValueError(ErrorMessages.NO_MEDIA_REFERENCE)
        return self

    @classmethod
    def from_draft(
        cls,
        draft: TrackDraft,
        resource_id: str,
        resource_kind: ResourceKind,
        added_by: str,
        added_at: datetime | None = None,
    ) -> Track:
        return cls(
            resource_id=resource_id,
            resource_kind=resource_kind,
            added_by=added_by,
            added_at=added_at or utcnow(),
            **draft.model_dump(),
        )

    @property
    def media_reference(self) -> str | None:
        return _pick_media(self.video_id, self.catalog_uri)

    @property
    def is_played(self) -> bool:
        return self.state is TrackState.PLAYED

    @property
    def duration_formatted(self) -> str:
        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"

    def was_added_by(self, account_id: str) -> bool:
        return self.added_by == account_id
