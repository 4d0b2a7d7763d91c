"""DTOs exchanged between the session queue and its collaborators."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import MediaItem
from ...domain.music.value_objects import RepeatMode
from ...domain.shared.types import NonNegativeFloat, NonNegativeInt, VolumePercent


class NowPlayingSnapshot(BaseModel):
    """Point-in-time view of a session, rendered by the now-playing display."""

    model_config = ConfigDict(frozen=True)

    guild_id: int
    item: MediaItem
    elapsed_seconds: NonNegativeFloat = 0.0
    volume: VolumePercent
    repeat_mode: RepeatMode
    paused: bool = False
    upcoming_count: NonNegativeInt = 0
    next_item: MediaItem | None = None


class QueueInfo(BaseModel):

    current_item: MediaItem | None
    upcoming_items: list[MediaItem]
    total_duration_seconds: NonNegativeInt
    repeat_mode: RepeatMode
    volume: VolumePercent

    @property
    def total_length(self) -> int:
        return len(self.upcoming_items) + (1 if self.current_item else 0)
