"""Slash-command cog for queue management: view, remove, move, shuffle, clear."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from zyra_music.application.services.session_guards import require_session
from zyra_music.domain.shared.messages import DiscordUIMessages, ErrorMessages
from zyra_music.infrastructure.discord.guards.voice_guards import ensure_user_in_voice, get_member
from zyra_music.infrastructure.discord.services.session_notifier import format_requester
from zyra_music.utils.reply import format_duration, truncate

if TYPE_CHECKING:
    from ....application.services.session_models import QueueInfo
    from ....application.services.session_registry import SessionRegistry
    from ....config.container import Container

logger = logging.getLogger(__name__)

QUEUE_PER_PAGE = 10


def build_queue_embed(queue_info: QueueInfo, page: int) -> discord.Embed:
    upcoming = queue_info.upcoming_items
    total_pages = max(1, math.ceil(len(upcoming) / QUEUE_PER_PAGE))
    page = max(1, min(page, total_pages))
    start_idx = (page - 1) * QUEUE_PER_PAGE

    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE.format(
            total_tracks=queue_info.total_length, page=page, total_pages=total_pages
        ),
        color=discord.Color.blurple(),
    )

    if queue_info.current_item:
        embed.add_field(
            name="\U0001f3b5 Now Playing",
            value=f"**{truncate(queue_info.current_item.title)}**\n"
            f"Duration: {queue_info.current_item.duration_formatted}",
            inline=False,
        )

    for idx, item in enumerate(upcoming[start_idx : start_idx + QUEUE_PER_PAGE], start=start_idx + 1):
        embed.add_field(
            name=f"{idx}. {truncate(item.title)}",
            value=f"{item.duration_formatted} • Requested by: {format_requester(item)}",
            inline=False,
        )

    embed.set_footer(
        text=DiscordUIMessages.QUEUE_FOOTER.format(
            duration=format_duration(queue_info.total_duration_seconds),
            mode=queue_info.repeat_mode.value,
            volume=queue_info.volume,
        )
    )
    return embed


class QueueCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def registry(self) -> SessionRegistry:
        return self.container.session_registry

    @app_commands.command(name="queue", description="Show the current queue.")
    @app_commands.describe(page="Page number")
    async def queue(self, interaction: discord.Interaction, page: int = 1) -> None:
        if await get_member(interaction) is None:
            return

        assert interaction.guild is not None

        session = self.registry.get(interaction.guild.id)
        if session is None or session.queue_length == 0:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_QUEUE_EMPTY, ephemeral=True
            )
            return

        embed = build_queue_embed(session.queue_info(), page)
        await interaction.response.send_message(embed=embed, ephemeral=True)

    @app_commands.command(name="remove", description="Remove a track from the queue.")
    @app_commands.describe(position="Position in the upcoming queue (1 = next)")
    async def remove(self, interaction: discord.Interaction, position: int) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "remove")
        item = session.remove(position)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_TRACK_REMOVED.format(track_title=truncate(item.title, 80))
        )

    @app_commands.command(name="move", description="Move a track to another queue position.")
    @app_commands.describe(
        from_position="Current position in the upcoming queue",
        to_position="New position in the upcoming queue",
    )
    @app_commands.rename(from_position="from", to_position="to")
    async def move(
        self, interaction: discord.Interaction, from_position: int, to_position: int
    ) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "move")
        item = session.move(from_position, to_position)
        await interaction.response.send_message(
            DiscordUIMessages.ACTION_TRACK_MOVED.format(
                track_title=truncate(item.title, 80), position=to_position
            )
        )

    @app_commands.command(name="shuffle", description="Shuffle the upcoming tracks.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "shuffle")
        session.shuffle()
        await interaction.response.send_message(DiscordUIMessages.ACTION_SHUFFLED)

    @app_commands.command(name="clear", description="Clear the upcoming tracks.")
    async def clear(self, interaction: discord.Interaction) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        assert interaction.guild is not None

        session = require_session(self.registry, interaction.guild.id, "clear")
        count = session.clear()

        if count > 0:
            await interaction.response.send_message(
                DiscordUIMessages.ACTION_QUEUE_CLEARED.format(count=count)
            )
        else:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_QUEUE_ALREADY_EMPTY, ephemeral=True
            )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(QueueCog(bot, container))
