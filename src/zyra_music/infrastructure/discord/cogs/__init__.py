"""Discord cogs - command handlers."""

from zyra_music.infrastructure.discord.cogs.event_cog import EventCog
from zyra_music.infrastructure.discord.cogs.music_cog import MusicCog
from zyra_music.infrastructure.discord.cogs.playback_cog import PlaybackCog
from zyra_music.infrastructure.discord.cogs.queue_cog import QueueCog

__all__ = [
    "MusicCog",
    "PlaybackCog",
    "QueueCog",
    "EventCog",
]
