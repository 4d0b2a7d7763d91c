"""Discord voice adapter implementing VoiceConnector and VoiceTransport."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

import discord

from zyra_music.application.interfaces.voice_transport import (
    ItemEndCallback,
    VoiceConnector,
    VoiceTransport,
)
from zyra_music.config.settings import VoiceSettings
from zyra_music.domain.shared.exceptions import OperationTimeoutError, UpstreamFailureError
from zyra_music.domain.shared.messages import ErrorMessages, LogTemplates
from zyra_music.infrastructure.audio.ffmpeg_pipeline import FFmpegAudioStream

if TYPE_CHECKING:
    from ....application.interfaces.streaming import AudioStream

logger = logging.getLogger(__name__)

SERVICE_NAME: Final[str] = "discord-voice"


class DiscordVoiceTransport(VoiceTransport):
    """Wraps one guild's ``discord.VoiceClient``."""

    def __init__(self, voice_client: discord.VoiceClient, loop: asyncio.AbstractEventLoop) -> None:
        self._vc = voice_client
        self._loop = loop
        self._destroyed = False

    @property
    def guild_id(self) -> int:
        return self._vc.guild.id

    @property
    def channel_id(self) -> int | None:
        return self._vc.channel.id if self._vc.channel else None

    def attach(self, stream: AudioStream, on_end: ItemEndCallback) -> None:
        if not isinstance(stream, FFmpegAudioStream):
            raise TypeError(f"Unsupported stream type: {type(stream).__name__}")

        guild_id = self.guild_id

        def after_callback(error: Exception | None = None) -> None:
            # Runs on discord.py's audio thread.
            logger.debug(LogTemplates.VOICE_ITEM_ENDED, guild_id, error)
            asyncio.run_coroutine_threadsafe(on_end(error), self._loop)

        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()
        try:
            self._vc.play(stream.source, after=after_callback)
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

    def stop(self) -> None:
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

    def pause(self) -> None:
        if self._vc.is_playing():
            self._vc.pause()

    def resume(self) -> None:
        if self._vc.is_paused():
            self._vc.resume()

    def is_connected(self) -> bool:
        return not self._destroyed and self._vc.is_connected()

    async def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        guild_id = self.guild_id
        try:
            await self._vc.disconnect(force=True)
        except discord.DiscordException as e:
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e
        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)


class DiscordVoiceConnector(VoiceConnector):
    def __init__(self, bot: discord.Client, settings: VoiceSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or VoiceSettings()

    def _get_channel(
        self, guild_id: int, channel_id: int
    ) -> tuple[discord.Guild, discord.VoiceChannel | discord.StageChannel]:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.GUILD_NOT_FOUND.format(id=guild_id))

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise UpstreamFailureError(
                SERVICE_NAME, ErrorMessages.CHANNEL_NOT_VOICE.format(id=channel_id)
            )
        return guild, channel

    async def join(self, guild_id: int, channel_id: int) -> DiscordVoiceTransport:
        guild, channel = self._get_channel(guild_id, channel_id)
        timeout = self._settings.connect_timeout_seconds

        existing = guild.voice_client
        if isinstance(existing, discord.VoiceClient) and not existing.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await existing.disconnect(force=True)
            existing = None

        try:
            async with asyncio.timeout(timeout):
                if isinstance(existing, discord.VoiceClient):
                    if existing.channel is None or existing.channel.id != channel_id:
                        await existing.move_to(channel)
                    voice_client = existing
                else:
                    voice_client = await channel.connect(self_deaf=True)
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            await self._abandon(guild)
            raise OperationTimeoutError("voice connect", timeout) from e
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise UpstreamFailureError(SERVICE_NAME, ErrorMessages.VOICE_NO_PERMISSION) from e
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return DiscordVoiceTransport(voice_client, self._bot.loop)

    async def _abandon(self, guild: discord.Guild) -> None:
        """Tear down a half-open connection left behind by a timed-out join."""
        vc = guild.voice_client
        if vc is None:
            return
        try:
            await vc.disconnect(force=True)
        except discord.DiscordException as e:
            logger.debug(LogTemplates.VOICE_CLEANUP_ERROR, guild.id, e)
