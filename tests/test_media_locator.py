"""Tests for MediaLocatorService query classification and resolution."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_entry, make_item, make_track
from zyra_music.application.interfaces.catalog import CatalogListing
from zyra_music.application.services.media_locator import (
    MediaLocatorService,
    is_personalized_playlist,
)
from zyra_music.config.settings import CollectionSettings
from zyra_music.domain.music.entities import Collection, MediaItem
from zyra_music.domain.music.value_objects import CatalogOrigin
from zyra_music.domain.shared.exceptions import (
    NotFoundError,
    UnsupportedInputError,
    UpstreamFailureError,
)
from zyra_music.infrastructure.audio.ytdlp_catalog import YtDlpCatalog
from zyra_music.infrastructure.spotify.client import parse_spotify_reference

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
PLAYLIST_URL = "https://www.youtube.com/playlist?list=PLabc123"
MIX_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=RDdQw4w9WgXcQ"
SPOTIFY_TRACK = "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"
SPOTIFY_PLAYLIST = "https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M"
SPOTIFY_ALBUM = "spotify:album:4aawyAB9vmqN3uQ7FjRGTy"


@pytest.fixture
def primary():
    helper = YtDlpCatalog()
    mock = MagicMock()
    mock.is_url.side_effect = helper.is_url
    mock.is_video_url.side_effect = helper.is_video_url
    mock.playlist_id.side_effect = helper.playlist_id
    mock.search = AsyncMock(return_value=[make_entry("Search Hit", 210)])
    mock.get_video = AsyncMock(side_effect=lambda url: make_entry("Full Info", 212, url=url))
    mock.get_playlist = AsyncMock(
        return_value=CatalogListing(
            title="YT Playlist",
            entries=[make_entry("One", 100), make_entry("Two", 120)],
            total=2,
        )
    )
    return mock


@pytest.fixture
def secondary():
    mock = MagicMock()
    mock.is_configured = True
    mock.parse_reference.side_effect = parse_spotify_reference
    mock.get_track = AsyncMock(return_value=make_track())
    mock.search_tracks = AsyncMock(return_value=[make_track()])
    return mock


@pytest.fixture
def resolver():
    mock = MagicMock()

    async def resolve(track):
        return make_item(f"Matched {track.title}", origin=CatalogOrigin.SECONDARY)

    mock.resolve_best_match = AsyncMock(side_effect=resolve)
    return mock


@pytest.fixture
def locator(primary, secondary, resolver):
    return MediaLocatorService(
        primary=primary,
        secondary=secondary,
        resolver=resolver,
        settings=CollectionSettings(sync_resolve_count=3),
    )


def _listing(*titles: str) -> CatalogListing:
    tracks = [make_track(title, track_id=f"id-{title}") for title in titles]
    return CatalogListing(title="Road Trip", entries=tracks, total=len(tracks))


class TestQueryClassification:
    @pytest.mark.parametrize(
        ("list_id", "expected"),
        [("RDdQw4w9WgXcQ", True), ("LL", True), ("WL", True), ("PLabc123", False)],
    )
    def test_personalized_playlist_prefixes(self, list_id, expected):
        assert is_personalized_playlist(list_id) is expected

    @pytest.mark.asyncio
    async def test_empty_query(self, locator):
        with pytest.raises(NotFoundError):
            await locator.resolve("   ")

    def test_secondary_enabled(self, primary, secondary, resolver):
        assert MediaLocatorService(primary=primary, secondary=secondary, resolver=resolver).secondary_enabled
        assert not MediaLocatorService(primary=primary, resolver=resolver).secondary_enabled


class TestSecondaryReferences:
    @pytest.mark.asyncio
    async def test_track_url(self, locator, secondary, resolver):
        item = await locator.resolve(SPOTIFY_TRACK, requester_id=222, requester_name="TestUser")

        assert isinstance(item, MediaItem)
        assert item.title == "Matched Blinding Lights"
        assert item.requested_by_id == 222
        secondary.get_track.assert_awaited_once_with("4uLU6hMCjMI75M1A2tKUQC")

    @pytest.mark.asyncio
    async def test_track_without_match(self, locator, resolver):
        resolver.resolve_best_match.side_effect = None
        resolver.resolve_best_match.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await locator.resolve(SPOTIFY_TRACK)

        assert "The Weeknd - Blinding Lights" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unconfigured_secondary_rejects_links(self, locator, secondary):
        secondary.is_configured = False

        with pytest.raises(UnsupportedInputError):
            await locator.resolve(SPOTIFY_TRACK)
        secondary.get_track.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_playlist_resolves_head_and_defers_rest(self, locator, secondary, resolver):
        secondary.get_playlist = AsyncMock(return_value=_listing("A", "B", "C", "D", "E"))

        collection = await locator.resolve(
            SPOTIFY_PLAYLIST, requester_id=222, requester_name="TestUser"
        )

        assert isinstance(collection, Collection)
        assert collection.origin is CatalogOrigin.SECONDARY
        assert [item.title for item in collection.items] == ["Matched A", "Matched B", "Matched C"]
        assert [track.title for track in collection.deferred] == ["D", "E"]
        assert collection.total_tracks == 5
        assert all(item.requested_by_name == "TestUser" for item in collection.items)
        assert resolver.resolve_best_match.await_count == 3
        secondary.get_playlist.assert_awaited_once_with("37i9dQZF1DXcBWIGoYBM5M", 500)

    @pytest.mark.asyncio
    async def test_playlist_keeps_resolving_until_first_match(self, locator, secondary, resolver):
        secondary.get_playlist = AsyncMock(return_value=_listing("A", "B", "C", "D", "E"))

        async def resolve(track):
            return make_item("Matched D") if track.title == "D" else None

        resolver.resolve_best_match.side_effect = resolve

        collection = await locator.resolve(SPOTIFY_PLAYLIST)

        assert [item.title for item in collection.items] == ["Matched D"]
        assert [track.title for track in collection.deferred] == ["E"]

    @pytest.mark.asyncio
    async def test_playlist_without_any_match(self, locator, secondary, resolver):
        secondary.get_playlist = AsyncMock(return_value=_listing("A", "B"))
        resolver.resolve_best_match.side_effect = None
        resolver.resolve_best_match.return_value = None

        with pytest.raises(NotFoundError):
            await locator.resolve(SPOTIFY_PLAYLIST)

    @pytest.mark.asyncio
    async def test_empty_playlist(self, locator, secondary):
        secondary.get_playlist = AsyncMock(return_value=_listing())

        with pytest.raises(NotFoundError):
            await locator.resolve(SPOTIFY_PLAYLIST)

    @pytest.mark.asyncio
    async def test_album_uri(self, locator, secondary):
        secondary.get_album = AsyncMock(return_value=_listing("A", "B"))

        collection = await locator.resolve(SPOTIFY_ALBUM)

        assert [item.title for item in collection.items] == ["Matched A", "Matched B"]
        assert collection.deferred == ()
        secondary.get_album.assert_awaited_once_with("4aawyAB9vmqN3uQ7FjRGTy", 500)


class TestPrimaryUrls:
    @pytest.mark.asyncio
    async def test_video_url(self, locator, primary):
        item = await locator.resolve(VIDEO_URL, requester_id=222, requester_name="TestUser")

        assert item.title == "Full Info"
        assert item.source_url == VIDEO_URL
        assert item.origin is CatalogOrigin.PRIMARY
        assert item.requested_by_name == "TestUser"
        primary.get_video.assert_awaited_once_with(VIDEO_URL)

    @pytest.mark.asyncio
    async def test_playlist_url(self, locator, primary):
        collection = await locator.resolve(PLAYLIST_URL)

        assert isinstance(collection, Collection)
        assert collection.title == "YT Playlist"
        assert [item.title for item in collection.items] == ["One", "Two"]
        assert not collection.has_deferred
        primary.get_playlist.assert_awaited_once_with(PLAYLIST_URL, 500)

    @pytest.mark.asyncio
    async def test_personalized_mix_rejected(self, locator, primary):
        with pytest.raises(UnsupportedInputError):
            await locator.resolve(MIX_URL)
        primary.get_playlist.assert_not_awaited()


class TestFreeText:
    @pytest.mark.asyncio
    async def test_secondary_search_first(self, locator, secondary, primary):
        item = await locator.resolve("blinding lights")

        assert item.title == "Matched Blinding Lights"
        secondary.search_tracks.assert_awaited_once_with("blinding lights", 1)
        primary.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_primary_search(self, locator, secondary, primary):
        secondary.search_tracks.side_effect = UpstreamFailureError("spotify", "HTTP 503")

        item = await locator.resolve("blinding lights")

        assert item.title == "Full Info"
        primary.search.assert_awaited_once_with("blinding lights", 1)

    @pytest.mark.asyncio
    async def test_falls_back_when_secondary_has_no_hits(self, locator, secondary, primary):
        secondary.search_tracks.return_value = []

        item = await locator.resolve("obscure bootleg")

        assert item.title == "Full Info"

    @pytest.mark.asyncio
    async def test_primary_only(self, primary, resolver):
        locator = MediaLocatorService(primary=primary, resolver=resolver)

        item = await locator.resolve("lofi beats")

        assert item.title == "Full Info"
        resolver.resolve_best_match.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_full_info_failure_uses_search_entry(self, primary, resolver):
        primary.get_video.side_effect = UpstreamFailureError("yt-dlp", "private video")
        locator = MediaLocatorService(primary=primary, resolver=resolver)

        item = await locator.resolve("lofi beats")

        assert item.title == "Search Hit"

    @pytest.mark.asyncio
    async def test_nothing_found(self, primary, resolver):
        primary.search.return_value = []
        locator = MediaLocatorService(primary=primary, resolver=resolver)

        with pytest.raises(NotFoundError):
            await locator.resolve("zzzz")
