"""Pydantic models for the Spotify Web API payloads the client reads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from zyra_music.domain.music.entities import TrackMetadata


class SpotifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TokenResponse(SpotifyModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class SpotifyArtist(SpotifyModel):
    name: str = ""


class SpotifyAlbumRef(SpotifyModel):
    name: str | None = None


class SpotifyTrack(SpotifyModel):
    id: str | None = None
    name: str = ""
    type: str = "track"
    artists: list[SpotifyArtist] = Field(default_factory=list)
    duration_ms: int | None = 0
    album: SpotifyAlbumRef | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)
    is_local: bool = False

    def to_metadata(self, album_name: str | None = None) -> TrackMetadata | None:
        """Convert to domain metadata; None for entries that cannot be matched."""
        if self.is_local or not self.id or self.type != "track":
            return None
        artists = tuple(a.name for a in self.artists if a.name)
        if not self.name.strip() or not artists:
            return None
        return TrackMetadata(
            id=self.id,
            title=self.name.strip(),
            artists=artists,
            duration_ms=max(self.duration_ms or 0, 0),
            album=album_name or (self.album.name if self.album else None),
            url=self.external_urls.get("spotify"),
        )


class PlaylistItem(SpotifyModel):
    track: SpotifyTrack | None = None
    is_local: bool = False


class Page(SpotifyModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    next: str | None = None
    total: int = 0


class TrackSearchResponse(SpotifyModel):
    tracks: Page = Field(default_factory=Page)


class NamedResource(SpotifyModel):
    name: str = ""
