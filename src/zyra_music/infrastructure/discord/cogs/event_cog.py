"""Discord event listeners for lifecycle, guild, and voice events."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from zyra_music.domain.music.value_objects import StopReason
from zyra_music.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container
        self._resumed_logged_once = False

        # One reconnect watcher per guild
        self._reconnect_tasks: dict[int, asyncio.Task[bool]] = {}

    async def cog_unload(self) -> None:
        for task in self._reconnect_tasks.values():
            task.cancel()
        self._reconnect_tasks.clear()

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info(LogTemplates.EVENT_GATEWAY_CONNECTED)

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning(LogTemplates.EVENT_GATEWAY_DISCONNECTED)

    @commands.Cog.listener()
    async def on_resumed(self) -> None:
        if not self._resumed_logged_once:
            logger.info(LogTemplates.EVENT_GATEWAY_RESUMED)
            self._resumed_logged_once = True

    # ─────────────────────────────────────────────────────────────────
    # Guild Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.EVENT_GUILD_JOINED, guild.name, guild.id)

    @commands.Cog.listener()
    async def on_guild_remove(self, guild: discord.Guild) -> None:
        logger.info(LogTemplates.EVENT_GUILD_LEFT, guild.name, guild.id)

        session = self.container.session_registry.get(guild.id)
        if session is not None:
            await session.stop(StopReason.DISCONNECT)

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        if self.bot.user is None or member.id != self.bot.user.id:
            return

        # Only a drop out of voice matters; moves are handled by the voice client.
        if before.channel is None or after.channel is not None:
            return

        guild_id = member.guild.id
        session = self.container.session_registry.get(guild_id)
        if session is None or session.is_destroyed:
            return

        existing = self._reconnect_tasks.get(guild_id)
        if existing is not None and not existing.done():
            return

        logger.info(LogTemplates.EVENT_BOT_VOICE_DROPPED, guild_id, before.channel.id)
        task = asyncio.create_task(session.handle_transport_lost())
        self._reconnect_tasks[guild_id] = task
        task.add_done_callback(lambda t, gid=guild_id: self._forget_reconnect(gid, t))

    def _forget_reconnect(self, guild_id: int, task: asyncio.Task[bool]) -> None:
        if self._reconnect_tasks.get(guild_id) is task:
            del self._reconnect_tasks[guild_id]

        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(LogTemplates.EVENT_RECONNECT_FAILED, guild_id, error)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
