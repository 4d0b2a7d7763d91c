"""Tests for the Spotify Web API catalog client."""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from zyra_music.application.interfaces.catalog import ReferenceKind
from zyra_music.config.settings import CollectionSettings, SpotifySettings
from zyra_music.domain.shared.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    UpstreamFailureError,
)
from zyra_music.infrastructure.spotify.client import SpotifyCatalog, parse_spotify_reference

NEXT_PAGE = "https://api.spotify.com/v1/playlists/pl1/tracks?offset=2&limit=2"


def _track(track_id: str, name: str, artists=("Artist",), duration_ms=200_000, **extra) -> dict:
    return {
        "id": track_id,
        "name": name,
        "type": "track",
        "artists": [{"name": artist} for artist in artists],
        "duration_ms": duration_ms,
        "album": {"name": "Album"},
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
        **extra,
    }


class FakeSpotifyApi:
    """Routes requests to canned responses and records what was asked for."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_calls = 0
        self.responses: dict[str, list[tuple[int, dict | None]]] = {}

    def add(self, path: str, *responses: tuple[int, dict | None]) -> None:
        self.responses.setdefault(path, []).extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "accounts.spotify.com":
            self.token_calls += 1
            return httpx.Response(
                200, json={"access_token": f"token-{self.token_calls}", "expires_in": 3600}
            )

        queue = self.responses.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"error": {"status": 404}})
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status, json=body)

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.spotify.com"]


@pytest.fixture
def api():
    return FakeSpotifyApi()


@pytest.fixture
def settings():
    return SpotifySettings(client_id="client-id", client_secret="client-secret")


@pytest.fixture
def collections():
    return CollectionSettings(page_size=2, page_delay_seconds=0.0)


@pytest_asyncio.fixture
async def client(api, settings, collections):
    catalog = SpotifyCatalog(settings, collections, transport=httpx.MockTransport(api))
    yield catalog
    await catalog.close()


class TestParseReference:
    @pytest.mark.parametrize(
        ("query", "kind", "ref_id"),
        [
            ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC", ReferenceKind.TRACK, "4uLU6hMCjMI75M1A2tKUQC"),
            ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc", ReferenceKind.TRACK, "4uLU6hMCjMI75M1A2tKUQC"),
            ("open.spotify.com/intl-de/album/4aawyAB9vmqN3uQ7FjRGTy", ReferenceKind.ALBUM, "4aawyAB9vmqN3uQ7FjRGTy"),
            ("spotify:playlist:37i9dQZF1DXcBWIGoYBM5M", ReferenceKind.PLAYLIST, "37i9dQZF1DXcBWIGoYBM5M"),
        ],
    )
    def test_recognized(self, query, kind, ref_id):
        reference = parse_spotify_reference(query)

        assert reference is not None
        assert reference.kind is kind
        assert reference.id == ref_id
        assert reference.is_collection is (kind is not ReferenceKind.TRACK)

    @pytest.mark.parametrize(
        "query",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://open.spotify.com/artist/0TnOYISbd1XYRBk9myaseg",
            "blinding lights",
        ],
    )
    def test_not_recognized(self, query):
        assert parse_spotify_reference(query) is None


class TestSpotifyCatalog:
    @pytest.mark.asyncio
    async def test_get_track(self, client, api):
        api.add("/v1/tracks/t1", (200, _track("t1", "Song", ("A", "B"))))

        track = await client.get_track("t1")

        assert track.id == "t1"
        assert track.artists == ("A", "B")
        assert track.duration_seconds == 200
        assert track.album == "Album"
        request = api.api_requests[0]
        assert request.headers["Authorization"] == "Bearer token-1"

    @pytest.mark.asyncio
    async def test_token_is_cached(self, client, api):
        api.add("/v1/tracks/t1", (200, _track("t1", "Song")))

        await client.get_track("t1")
        await client.get_track("t1")

        assert api.token_calls == 1

    @pytest.mark.asyncio
    async def test_unauthorized_refreshes_token_once(self, client, api):
        api.add(
            "/v1/tracks/t1",
            (401, None),
            (200, _track("t1", "Song")),
        )

        track = await client.get_track("t1")

        assert track.title == "Song"
        assert api.token_calls == 2
        assert api.api_requests[-1].headers["Authorization"] == "Bearer token-2"

    @pytest.mark.asyncio
    async def test_missing_track(self, client):
        with pytest.raises(NotFoundError) as exc_info:
            await client.get_track("nope")

        assert "nope" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error(self, client, api):
        api.add("/v1/tracks/t1", (503, None))

        with pytest.raises(UpstreamFailureError):
            await client.get_track("t1")

    @pytest.mark.asyncio
    async def test_timeout(self, settings, collections):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
            raise httpx.ReadTimeout("slow", request=request)

        catalog = SpotifyCatalog(settings, collections, transport=httpx.MockTransport(handler))

        with pytest.raises(OperationTimeoutError):
            await catalog.get_track("t1")
        await catalog.close()

    @pytest.mark.asyncio
    async def test_token_failure(self, settings, collections):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_client"})

        catalog = SpotifyCatalog(settings, collections, transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamFailureError):
            await catalog.get_track("t1")
        await catalog.close()

    @pytest.mark.asyncio
    async def test_unconfigured_client_makes_no_requests(self, collections, api):
        catalog = SpotifyCatalog(SpotifySettings(), collections, transport=httpx.MockTransport(api))

        assert not catalog.is_configured
        with pytest.raises(UpstreamFailureError):
            await catalog.get_track("t1")
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_search_tracks_skips_unusable_results(self, client, api):
        api.add(
            "/v1/search",
            (
                200,
                {
                    "tracks": {
                        "items": [
                            _track("t1", "Song"),
                            _track("t2", "Local", is_local=True),
                            _track("t3", "No Artist", artists=()),
                        ]
                    }
                },
            ),
        )

        results = await client.search_tracks("song", 3)

        assert [t.id for t in results] == ["t1"]
        params = api.api_requests[0].url.params
        assert params["q"] == "song"
        assert params["type"] == "track"
        assert params["limit"] == "3"

    @pytest.mark.asyncio
    async def test_playlist_follows_pagination(self, client, api):
        api.add("/v1/playlists/pl1", (200, {"name": "Road Trip"}))
        api.add(
            "/v1/playlists/pl1/tracks",
            (
                200,
                {
                    "items": [{"track": _track("t1", "One")}, {"track": _track("t2", "Two")}],
                    "next": NEXT_PAGE,
                    "total": 4,
                },
            ),
            (
                200,
                {
                    "items": [
                        {"track": None},
                        {"is_local": True, "track": _track("t3", "Local")},
                        {"track": _track("t4", "Four")},
                    ],
                    "next": None,
                    "total": 4,
                },
            ),
        )

        listing = await client.get_playlist("pl1", 50)

        assert listing.title == "Road Trip"
        assert [t.id for t in listing.entries] == ["t1", "t2", "t4"]
        assert listing.total == 3
        assert str(api.api_requests[-1].url) == NEXT_PAGE

    @pytest.mark.asyncio
    async def test_playlist_respects_max_tracks(self, client, api):
        api.add("/v1/playlists/pl1", (200, {"name": "Road Trip"}))
        api.add(
            "/v1/playlists/pl1/tracks",
            (
                200,
                {
                    "items": [{"track": _track("t1", "One")}, {"track": _track("t2", "Two")}],
                    "next": NEXT_PAGE,
                },
            ),
        )

        listing = await client.get_playlist("pl1", 1)

        assert [t.id for t in listing.entries] == ["t1"]
        assert len(api.api_requests) == 2

    @pytest.mark.asyncio
    async def test_private_playlist(self, client):
        with pytest.raises(NotFoundError) as exc_info:
            await client.get_playlist("secret", 50)

        assert "secret" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_album_tracks_carry_album_name(self, client, api):
        api.add("/v1/albums/al1", (200, {"name": "After Hours"}))
        simplified = {k: v for k, v in _track("t1", "Alone Again").items() if k != "album"}
        api.add(
            "/v1/albums/al1/tracks",
            (200, {"items": [simplified], "next": None}),
        )

        listing = await client.get_album("al1", 50)

        assert listing.title == "After Hours"
        assert listing.entries[0].album == "After Hours"
