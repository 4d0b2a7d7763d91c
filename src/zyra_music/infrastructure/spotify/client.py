"""SecondaryCatalog implementation backed by the Spotify Web API."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final

import httpx

from zyra_music.application.interfaces.catalog import (
    CatalogListing,
    CatalogReference,
    ReferenceKind,
    SecondaryCatalog,
)
from zyra_music.config.settings import CollectionSettings, SpotifySettings
from zyra_music.domain.music.entities import TrackMetadata
from zyra_music.domain.shared.exceptions import (
    NotFoundError,
    OperationTimeoutError,
    UpstreamFailureError,
)
from zyra_music.domain.shared.messages import ErrorMessages, LogTemplates
from zyra_music.infrastructure.spotify.models import (
    NamedResource,
    Page,
    PlaylistItem,
    SpotifyTrack,
    TokenResponse,
    TrackSearchResponse,
)

logger = logging.getLogger(__name__)

SERVICE_NAME: Final[str] = "spotify"
API_BASE_URL: Final[str] = "https://api.spotify.com/v1"
TOKEN_URL: Final[str] = "https://accounts.spotify.com/api/token"
TOKEN_REFRESH_MARGIN: Final[int] = 60
MAX_SEARCH_LIMIT: Final[int] = 50

SPOTIFY_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:https?://)?open\.spotify\.com/(?:intl-[a-z]{2}(?:-[a-z]{2})?/)?"
    r"(track|playlist|album)/([A-Za-z0-9]+)",
    re.IGNORECASE,
)
SPOTIFY_URI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^spotify:(track|playlist|album):([A-Za-z0-9]+)$", re.IGNORECASE
)


def parse_spotify_reference(query: str) -> CatalogReference | None:
    query = query.strip()
    match = SPOTIFY_URL_PATTERN.match(query) or SPOTIFY_URI_PATTERN.match(query)
    if match is None:
        return None
    return CatalogReference(kind=ReferenceKind(match.group(1).lower()), id=match.group(2))


class SpotifyCatalog(SecondaryCatalog):
    def __init__(
        self,
        settings: SpotifySettings | None = None,
        collection_settings: CollectionSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or SpotifySettings()
        self._collections = collection_settings or CollectionSettings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    def parse_reference(self, query: str) -> CatalogReference | None:
        return parse_spotify_reference(query)

    # ── HTTP plumbing ────────────────────────────────────────────────

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=API_BASE_URL,
                timeout=self._settings.request_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def _token_valid(self) -> bool:
        return self._token is not None and time.monotonic() < self._token_expires_at

    async def _get_token(self) -> str:
        if self._token_valid():
            assert self._token is not None
            return self._token

        # Concurrent callers wait for the refresh already in flight.
        async with self._token_lock:
            if self._token_valid():
                assert self._token is not None
                return self._token

            try:
                response = await self._get_client().post(
                    TOKEN_URL,
                    data={"grant_type": "client_credentials"},
                    auth=(
                        self._settings.client_id.get_secret_value(),
                        self._settings.client_secret.get_secret_value(),
                    ),
                )
                response.raise_for_status()
            except httpx.TimeoutException as e:
                raise OperationTimeoutError("spotify token", self._settings.request_timeout_seconds) from e
            except httpx.HTTPError as e:
                logger.error(LogTemplates.SPOTIFY_TOKEN_FAILED, e)
                raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.SPOTIFY_AUTH_FAILED) from e

            token = TokenResponse.model_validate(response.json())
            self._token = token.access_token
            self._token_expires_at = time.monotonic() + max(token.expires_in - TOKEN_REFRESH_MARGIN, 0)
            logger.debug(LogTemplates.SPOTIFY_TOKEN_REFRESHED, token.expires_in)
            return self._token

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
        not_found: str | None = None,
    ) -> dict[str, Any]:
        if not self.is_configured:
            raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.SECONDARY_NOT_CONFIGURED)

        timeout = timeout or self._settings.request_timeout_seconds
        for attempt in (1, 2):
            token = await self._get_token()
            try:
                response = await self._get_client().get(
                    url,
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                    timeout=timeout,
                )
            except httpx.TimeoutException as e:
                raise OperationTimeoutError(f"spotify GET {url}", timeout) from e
            except httpx.HTTPError as e:
                raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

            if response.status_code == 401 and attempt == 1:
                # Token revoked early; fetch a fresh one and retry once.
                self._token = None
                continue
            if response.status_code == 404:
                raise NotFoundError(not_found or ErrorMessages.SPOTIFY_NOT_FOUND, query=url)
            if response.is_error:
                logger.warning(LogTemplates.SPOTIFY_REQUEST_FAILED, url, response.status_code)
                raise UpstreamFailureError(
                    SERVICE_NAME, f"HTTP {response.status_code} for {url}"
                )
            return response.json()

        raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.SPOTIFY_AUTH_FAILED)

    # ── Catalog operations ───────────────────────────────────────────

    async def get_track(self, track_id: str) -> TrackMetadata:
        data = await self._get_json(
            f"/tracks/{track_id}",
            not_found=ErrorMessages.SPOTIFY_TRACK_NOT_FOUND.format(id=track_id),
        )
        metadata = SpotifyTrack.model_validate(data).to_metadata()
        if metadata is None:
            raise NotFoundError(ErrorMessages.SPOTIFY_TRACK_NOT_FOUND.format(id=track_id), track_id)
        return metadata

    async def search_tracks(self, query: str, limit: int = 1) -> list[TrackMetadata]:
        limit = max(1, min(limit, MAX_SEARCH_LIMIT))
        data = await self._get_json("/search", params={"q": query, "type": "track", "limit": limit})
        page = TrackSearchResponse.model_validate(data).tracks

        results: list[TrackMetadata] = []
        for raw in page.items:
            metadata = SpotifyTrack.model_validate(raw).to_metadata()
            if metadata is not None:
                results.append(metadata)
        return results

    async def get_playlist(self, playlist_id: str, max_tracks: int) -> CatalogListing:
        not_found = ErrorMessages.SPOTIFY_PLAYLIST_NOT_FOUND.format(id=playlist_id)
        info = await self._get_json(
            f"/playlists/{playlist_id}", params={"fields": "name"}, not_found=not_found
        )
        title = NamedResource.model_validate(info).name or "Spotify playlist"

        tracks: list[TrackMetadata] = []
        async for raw in self._paginate(f"/playlists/{playlist_id}/tracks", max_tracks, not_found):
            item = PlaylistItem.model_validate(raw)
            if item.is_local or item.track is None:
                continue
            metadata = item.track.to_metadata()
            if metadata is not None:
                tracks.append(metadata)
            if len(tracks) >= max_tracks:
                break

        logger.info(LogTemplates.SPOTIFY_COLLECTION_FETCHED, "playlist", title, len(tracks))
        return CatalogListing(title=title, entries=list(tracks), total=len(tracks))

    async def get_album(self, album_id: str, max_tracks: int) -> CatalogListing:
        not_found = ErrorMessages.SPOTIFY_ALBUM_NOT_FOUND.format(id=album_id)
        info = await self._get_json(f"/albums/{album_id}", not_found=not_found)
        title = NamedResource.model_validate(info).name or "Spotify album"

        tracks: list[TrackMetadata] = []
        async for raw in self._paginate(f"/albums/{album_id}/tracks", max_tracks, not_found):
            metadata = SpotifyTrack.model_validate(raw).to_metadata(album_name=title)
            if metadata is not None:
                tracks.append(metadata)
            if len(tracks) >= max_tracks:
                break

        logger.info(LogTemplates.SPOTIFY_COLLECTION_FETCHED, "album", title, len(tracks))
        return CatalogListing(title=title, entries=list(tracks), total=len(tracks))

    async def _paginate(self, path: str, max_items: int, not_found: str):
        """Yield raw page items until ``next`` runs out or ``max_items`` were yielded."""
        url: str | None = path
        params: dict[str, Any] | None = {"limit": self._collections.page_size, "offset": 0}
        yielded = 0
        first = True

        while url is not None and yielded < max_items:
            if not first and self._collections.page_delay_seconds:
                await asyncio.sleep(self._collections.page_delay_seconds)
            first = False

            data = await self._get_json(
                url,
                params=params,
                timeout=self._settings.page_timeout_seconds,
                not_found=not_found,
            )
            page = Page.model_validate(data)
            for raw in page.items:
                yield raw
                yielded += 1
                if yielded >= max_items:
                    return

            # ``next`` is an absolute URL that already carries limit/offset.
            url, params = page.next, None

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
