"""PrimaryCatalog implementation using yt-dlp for lookups, search and playlists."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, cast
from urllib.parse import parse_qs, urlparse

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from zyra_music.application.interfaces.catalog import CatalogListing, PrimaryCatalog
from zyra_music.config.settings import AudioSettings
from zyra_music.domain.music.entities import CatalogEntry
from zyra_music.domain.shared.exceptions import NotFoundError, UpstreamFailureError
from zyra_music.domain.shared.messages import ErrorMessages, LogTemplates
from zyra_music.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    CacheEntry,
    YtDlpEntryInfo,
    YtDlpOpts,
)

logger = logging.getLogger(__name__)

SERVICE_NAME: Final[str] = "yt-dlp"

# ── Module-level state and patterns ────────────────────────────────────

_info_cache: dict[str, CacheEntry] = {}

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"^https?://"),
    re.compile(r"^www\."),
]

YOUTUBE_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(https?://)?(www\.)?(m\.|music\.)?(youtube\.com|youtu\.?be)/.+$", re.IGNORECASE
)


class YtDlpCatalog(PrimaryCatalog):
    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_flat_opts(self, **overrides: Any) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist", **overrides)

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpEntryInfo:
        return YtDlpEntryInfo.model_validate(data)

    @staticmethod
    def _parse_entries(data: Any) -> list[YtDlpEntryInfo]:
        if not isinstance(data, dict):
            return []
        entries = data.get("entries") or []
        if not isinstance(entries, list):
            entries = list(entries)
        return [YtDlpEntryInfo.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    def _extract_info_sync(self, url: str) -> YtDlpEntryInfo | None:
        now = time.time()
        cached = _info_cache.get(url)
        if cached is not None:
            if now - cached.cached_at < CACHE_TTL:
                logger.debug(LogTemplates.CACHE_HIT_URL, url[:LOG_URL_TRUNCATE])
                return cached.info
            _info_cache.pop(url, None)

        with YoutubeDL(params=cast(Any, self._get_opts().model_dump())) as ydl:
            data = ydl.extract_info(url, download=False)
        result = self._parse_info(dict(data)) if isinstance(data, dict) else None

        _info_cache[url] = CacheEntry(info=result, cached_at=now)
        if len(_info_cache) > CACHE_MAX_SIZE:
            expired = [k for k, entry in _info_cache.items() if now - entry.cached_at >= CACHE_TTL]
            for k in expired:
                _info_cache.pop(k, None)
            if expired:
                logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

        return result

    def _search_sync(self, query: str, limit: int) -> list[YtDlpEntryInfo]:
        search_query = f"ytsearch{limit}:{query}"
        with YoutubeDL(params=cast(Any, self._get_flat_opts().model_dump())) as ydl:
            data = ydl.extract_info(search_query, download=False)
        return self._parse_entries(data)

    def _extract_playlist_sync(self, url: str, limit: int) -> tuple[str, list[YtDlpEntryInfo]]:
        opts = self._get_flat_opts(playlistend=limit)
        with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
            data = ydl.extract_info(url, download=False)
        title = data.get("title") if isinstance(data, dict) else None
        return (title or "Playlist"), self._parse_entries(data)[:limit]

    async def search(self, query: str, limit: int = 10) -> list[CatalogEntry]:
        try:
            results = await asyncio.to_thread(self._search_sync, query, limit)
        except DownloadError as e:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        entries: list[CatalogEntry] = []
        for info in results:
            entry = info.to_catalog_entry()
            if entry is not None:
                entries.append(entry)
        return entries

    async def get_video(self, url: str) -> CatalogEntry:
        try:
            info = await asyncio.to_thread(self._extract_info_sync, url)
        except DownloadError as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        entry = info.to_catalog_entry() if info is not None else None
        if entry is None:
            raise NotFoundError(ErrorMessages.NOTHING_FOUND.format(query=url), query=url)
        return entry

    async def get_playlist(self, url: str, limit: int) -> CatalogListing:
        try:
            title, results = await asyncio.to_thread(self._extract_playlist_sync, url, limit)
        except DownloadError as e:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        entries = [entry for info in results if (entry := info.to_catalog_entry()) is not None]
        return CatalogListing(title=title, entries=entries, total=len(entries))

    async def resolve_stream_url(self, url: str) -> str:
        """Return a direct media URL FFmpeg can read for ``url``."""
        try:
            info = await asyncio.to_thread(self._extract_info_sync, url)
        except DownloadError as e:
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        stream_url = self._extract_stream_url(info) if info is not None else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, url)
            raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.NO_STREAM_URL.format(url=url))
        return stream_url

    def _extract_stream_url(self, info: YtDlpEntryInfo) -> str | None:
        if info.url and info.url != info.webpage_url:
            return info.url
        return self._extract_stream_from_formats(info.formats)

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        if not formats:
            return None
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

    def is_video_url(self, query: str) -> bool:
        return bool(YOUTUBE_URL_PATTERN.match(query))

    def playlist_id(self, url: str) -> str | None:
        if not (self.is_url(url) or self.is_video_url(url)):
            return None
        parsed = urlparse(url if "://" in url else f"https://{url}")
        list_ids = parse_qs(parsed.query).get("list")
        return list_ids[0] if list_ids else None


def clear_info_cache() -> None:
    _info_cache.clear()
