"""Port interfaces for the primary (video) and secondary (metadata) catalogs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ...domain.shared.types import NonEmptyStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.entities import CatalogEntry, TrackMetadata


class ReferenceKind(Enum):
    TRACK = "track"
    PLAYLIST = "playlist"
    ALBUM = "album"


@dataclass(frozen=True, slots=True)
class CatalogReference:
    """A parsed secondary-catalog URL or URI."""

    kind: ReferenceKind
    id: str

    @property
    def is_collection(self) -> bool:
        return self.kind in {ReferenceKind.PLAYLIST, ReferenceKind.ALBUM}


@dataclass(slots=True)
class CatalogListing:
    """Title and ordered members of a playlist or album."""

    title: str
    entries: list[CatalogEntry | TrackMetadata] = field(default_factory=list)
    total: int = 0


class PrimaryCatalog(ABC):
    """Interface for the video platform: search, direct lookups and playlists."""

    @abstractmethod
    async def search(self, query: NonEmptyStr, limit: PositiveInt = 10) -> list["CatalogEntry"]:
        """Search for entries matching a query."""
        ...

    @abstractmethod
    async def get_video(self, url: NonEmptyStr) -> "CatalogEntry":
        """Fetch full metadata for a direct media URL.

        Raises:
            NotFoundError: the URL resolves to nothing playable.
            UpstreamFailureError: the lookup itself failed.
        """
        ...

    @abstractmethod
    async def get_playlist(self, url: NonEmptyStr, limit: PositiveInt) -> CatalogListing:
        """Fetch up to ``limit`` member entries of a playlist URL."""
        ...

    @abstractmethod
    def is_url(self, query: str) -> bool:
        ...

    @abstractmethod
    def is_video_url(self, query: str) -> bool:
        ...

    @abstractmethod
    def playlist_id(self, url: str) -> str | None:
        """Return the playlist identifier carried by ``url``, if any."""
        ...


class SecondaryCatalog(ABC):
    """Interface for the music-metadata platform."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are available to query the catalog."""
        ...

    @abstractmethod
    def parse_reference(self, query: str) -> CatalogReference | None:
        ...

    @abstractmethod
    async def search_tracks(
        self, query: NonEmptyStr, limit: PositiveInt = 1
    ) -> list["TrackMetadata"]:
        ...

    @abstractmethod
    async def get_track(self, track_id: NonEmptyStr) -> "TrackMetadata":
        ...

    @abstractmethod
    async def get_playlist(self, playlist_id: NonEmptyStr, max_tracks: PositiveInt) -> CatalogListing:
        ...

    @abstractmethod
    async def get_album(self, album_id: NonEmptyStr, max_tracks: PositiveInt) -> CatalogListing:
        ...

    async def close(self) -> None:
        """Release any network resources held by the client."""
        return None
