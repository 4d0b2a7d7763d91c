"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ...utils.reply import format_duration
from ..matching.scoring import normalize_duration
from ..shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    NonEmptyStr,
    NonNegativeFloat,
    NonNegativeInt,
    TrackTitleStr,
)
from .value_objects import CatalogOrigin


class MediaItem(BaseModel):
    """Immutable playable unit owned by exactly one session queue once enqueued."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    source_url: NonEmptyStr
    duration_seconds: DurationSeconds = 0
    thumbnail_url: str | None = None
    uploader: str = ""

    requested_by_id: DiscordSnowflake | None = None
    requested_by_name: NonEmptyStr | None = None

    origin: CatalogOrigin = CatalogOrigin.PRIMARY
    cross_catalog_ref: str | None = None

    @property
    def duration_formatted(self) -> str:
        if not self.duration_seconds:
            return "Unknown"
        return format_duration(self.duration_seconds)

    @property
    def display_title(self) -> str:
        """Get display title with duration if known."""
        if self.duration_seconds:
            return f"{self.title} [{self.duration_formatted}]"
        return self.title

    def with_requester(self, user_id: DiscordSnowflake, user_name: NonEmptyStr) -> MediaItem:
        return self.model_copy(update={"requested_by_id": user_id, "requested_by_name": user_name})


class TrackMetadata(BaseModel):
    """Metadata-only track reference from the secondary catalog."""

    model_config = ConfigDict(frozen=True)

    id: NonEmptyStr
    title: NonEmptyStr
    artists: tuple[str, ...] = ()
    duration_ms: NonNegativeInt = 0
    album: str | None = None
    url: str | None = None

    @property
    def duration_seconds(self) -> int:
        return round(self.duration_ms / 1000)

    @property
    def primary_artist(self) -> str:
        return self.artists[0] if self.artists else ""

    @property
    def artist_names(self) -> str:
        return ", ".join(self.artists)

    @property
    def display_name(self) -> str:
        if self.artists:
            return f"{self.primary_artist} - {self.title}"
        return self.title


class CatalogEntry(BaseModel):
    """A single primary-catalog search or lookup result."""

    model_config = ConfigDict(frozen=True)

    url: NonEmptyStr
    title: str = ""
    duration: NonNegativeFloat | None = None
    uploader: str = ""
    thumbnail_url: str | None = None

    @property
    def duration_seconds(self) -> int | None:
        """Duration in whole seconds, normalizing millisecond values."""
        normalized = normalize_duration(self.duration)
        if normalized is None:
            return None
        return int(round(normalized))

    def to_media_item(
        self,
        *,
        origin: CatalogOrigin = CatalogOrigin.PRIMARY,
        cross_catalog_ref: str | None = None,
        fallback_title: str | None = None,
    ) -> MediaItem:
        seconds = self.duration_seconds or 0
        return MediaItem(
            title=(self.title or fallback_title or "Unknown title")[:500],
            source_url=self.url,
            duration_seconds=min(seconds, 86_400),
            thumbnail_url=self.thumbnail_url or None,
            uploader=self.uploader,
            origin=origin,
            cross_catalog_ref=cross_catalog_ref,
        )


class Collection(BaseModel):
    """Ordered items produced from one playlist or album query.

    ``deferred`` holds secondary-catalog members that still need matching;
    the caller resolves them in the background after enqueueing ``items``.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    url: str | None = None
    origin: CatalogOrigin = CatalogOrigin.PRIMARY
    items: tuple[MediaItem, ...] = ()
    deferred: tuple[TrackMetadata, ...] = ()
    total_tracks: NonNegativeInt = Field(default=0)

    @property
    def has_deferred(self) -> bool:
        return bool(self.deferred)
