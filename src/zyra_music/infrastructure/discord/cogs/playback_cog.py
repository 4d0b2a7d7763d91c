"""Slash-command cog for playback controls: pause, resume, skip, stop, volume, loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from zyra_music.application.services.session_guards import (
    require_active,
    require_paused,
    require_playing,
    require_session,
)
from zyra_music.domain.music.value_objects import RepeatMode, StopReason
from zyra_music.domain.shared.messages import DiscordUIMessages, ErrorMessages
from zyra_music.infrastructure.discord.guards.voice_guards import ensure_user_in_voice, get_member
from zyra_music.infrastructure.discord.services.session_notifier import build_now_playing_embed
from zyra_music.utils.reply import truncate, volume_slider

if TYPE_CHECKING:
    from ....application.services.session_registry import SessionRegistry
    from ....config.container import Container

logger = logging.getLogger(__name__)


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def registry(self) -> SessionRegistry:
        return self.container.session_registry

    # ─────────────────────────────────────────────────────────────────
    # Pause / Resume
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="pause", description="Pause the current track.")
    async def pause(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_playing(self.registry, interaction.guild.id, "pause")
        session.pause()
        await interaction.response.send_message(DiscordUIMessages.ACTION_PAUSED, ephemeral=True)

    @app_commands.command(name="resume", description="Resume paused playback.")
    async def resume(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_paused(self.registry, interaction.guild.id, "resume")
        session.resume()
        await interaction.response.send_message(DiscordUIMessages.ACTION_RESUMED, ephemeral=True)

    # ─────────────────────────────────────────────────────────────────
    # Skip
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current track.")
    async def skip(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_active(self.registry, interaction.guild.id, "skip")
        title = session.current_item.title if session.current_item else "?"
        session.skip()
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_SKIPPED_TITLE.format(title=truncate(title, 80))
        )

    @app_commands.command(name="skipto", description="Jump to a track in the queue.")
    @app_commands.describe(position="Position in the upcoming queue (1 = next)")
    async def skipto(
        self, interaction: discord.Interaction, position: app_commands.Range[int, 1]
    ) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "skipto")
        await interaction.response.defer()
        # Upcoming position n is position n + 1 of the full queue.
        item = await session.skip_to(position + 1)
        await interaction.followup.send(
            DiscordUIMessages.ACTION_SKIPPED_TO.format(title=truncate(item.title, 80))
        )

    # ─────────────────────────────────────────────────────────────────
    # Stop
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="stop", description="Stop playback, clear the queue and leave.")
    async def stop(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = self.registry.get(interaction.guild.id)
        if session is None:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_NOTHING_PLAYING, ephemeral=True
            )
            return

        await interaction.response.defer()
        await session.stop(StopReason.USER_REQUEST)
        await interaction.followup.send(DiscordUIMessages.ACTION_STOPPED)

    # ─────────────────────────────────────────────────────────────────
    # Volume / Loop
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="volume", description="Set the playback volume.")
    @app_commands.describe(level="Volume from 0 to 100")
    async def volume(self, interaction: discord.Interaction, level: int) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "volume")
        session.set_volume(level)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_VOLUME_SET.format(
                volume=session.volume, slider=volume_slider(session.volume)
            )
        )

    @app_commands.command(name="loop", description="Set the repeat mode.")
    @app_commands.describe(mode="Repeat mode; omit to cycle off → single → all")
    @app_commands.choices(
        mode=[
            app_commands.Choice(name="Off", value=RepeatMode.OFF.value),
            app_commands.Choice(name="Single track", value=RepeatMode.SINGLE.value),
            app_commands.Choice(name="Whole queue", value=RepeatMode.ALL.value),
        ]
    )
    async def loop(
        self,
        interaction: discord.Interaction,
        mode: app_commands.Choice[str] | None = None,
    ) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "loop")
        if mode is None:
            new_mode = session.cycle_repeat_mode()
        else:
            new_mode = RepeatMode(mode.value)
            session.set_repeat_mode(new_mode)

        await interaction.response.send_message(
            DiscordUIMessages.ACTION_LOOP_MODE_CHANGED.format(
                emoji=new_mode.emoji, mode=new_mode.value
            )
        )

    # ─────────────────────────────────────────────────────────────────
    # Now Playing
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="nowplaying", description="Show the current track.")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        if await get_member(interaction) is None:
            return

        assert interaction.guild is not None

        session = self.registry.get(interaction.guild.id)
        snapshot = session.snapshot() if session is not None else None
        if snapshot is None:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_NOTHING_PLAYING, ephemeral=True
            )
            return

        await interaction.response.send_message(
            embed=build_now_playing_embed(snapshot), ephemeral=True
        )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
