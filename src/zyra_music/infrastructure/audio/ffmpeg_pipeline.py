"""
FFmpeg Stream Pipeline

Infrastructure component turning a media item into a discord.py audio source.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

import discord

from zyra_music.application.interfaces.streaming import AudioStream, StreamPipeline
from zyra_music.config.settings import AudioSettings
from zyra_music.domain.shared.exceptions import UpstreamFailureError
from zyra_music.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import MediaItem
    from .ytdlp_catalog import YtDlpCatalog

logger = logging.getLogger(__name__)

SERVICE_NAME: Final[str] = "ffmpeg"

# Make ffmpeg look like the Android client to avoid 403s on googlevideo URLs
YOUTUBE_HEADERS: Final[str] = (
    '-user_agent "com.google.android.youtube/19.02.39 (Linux; U; Android 14)" '
    '-referer "https://www.youtube.com/" '
    '-headers "Accept-Language: en-US,en;q=0.9"'
)


class FFmpegAudioStream(AudioStream):
    """A PCMVolumeTransformer-wrapped FFmpeg process."""

    def __init__(self, source: discord.PCMVolumeTransformer) -> None:
        self._source = source

    @property
    def source(self) -> discord.PCMVolumeTransformer:
        return self._source

    def set_volume(self, volume: int) -> None:
        self._source.volume = volume / 100

    def cleanup(self) -> None:
        self._source.cleanup()


class FFmpegStreamPipeline(StreamPipeline):
    """Resolves a direct stream URL with yt-dlp and spawns FFmpeg for it."""

    def __init__(self, catalog: YtDlpCatalog, settings: AudioSettings | None = None) -> None:
        self._catalog = catalog
        self._settings = settings or AudioSettings()

    def _before_options(self) -> str:
        before = self._settings.ffmpeg_options.get("before_options", "")
        return f"{before} {YOUTUBE_HEADERS}".strip()

    def _options(self) -> str:
        return self._settings.ffmpeg_options.get("options", "-vn")

    def create_source(self, stream_url: str, volume: int) -> discord.PCMVolumeTransformer:
        """Create a volume-controlled FFmpeg source for ``stream_url``.

        Raises:
            UpstreamFailureError: FFmpeg could not be started.
        """
        try:
            source = discord.FFmpegPCMAudio(
                stream_url,
                before_options=self._before_options(),
                options=self._options(),
            )
        except discord.ClientException as e:
            logger.error(LogTemplates.FFMPEG_DISCORD_CLIENT_ERROR, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        return discord.PCMVolumeTransformer(source, volume=volume / 100)

    async def open_stream(self, item: MediaItem, *, volume: int) -> FFmpegAudioStream:
        stream_url = await self._catalog.resolve_stream_url(item.source_url)
        stream = FFmpegAudioStream(self.create_source(stream_url, volume))
        logger.debug(LogTemplates.FFMPEG_STREAM_OPENED, item.title)
        return stream
