"""Audio infrastructure - yt-dlp catalog and FFmpeg stream pipeline."""

from zyra_music.infrastructure.audio.ffmpeg_pipeline import FFmpegAudioStream, FFmpegStreamPipeline
from zyra_music.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpEntryInfo,
    YtDlpOpts,
)
from zyra_music.infrastructure.audio.ytdlp_catalog import YtDlpCatalog

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegAudioStream",
    "FFmpegStreamPipeline",
    "YtDlpCatalog",
    "YtDlpEntryInfo",
    "YtDlpOpts",
]
