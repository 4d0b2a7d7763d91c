"""Slash-command cog for starting playback: play, search, join and help."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from zyra_music.application.commands.play_media import JoinRequest, PlayRequest, PlayResult
from zyra_music.domain.shared.exceptions import (
    AlreadyExistsError,
    DomainError,
    InvalidStateError,
    OperationTimeoutError,
    UpstreamFailureError,
)
from zyra_music.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from zyra_music.infrastructure.discord.guards.voice_guards import (
    ensure_user_in_voice,
    send_ephemeral,
)
from zyra_music.infrastructure.discord.views.search_view import MAX_RESULTS, SearchResultsView

if TYPE_CHECKING:
    from ....config.container import Container
    from ....domain.music.entities import CatalogEntry

logger = logging.getLogger(__name__)


def build_help_embed(app_cmds: list[app_commands.Command | app_commands.Group]) -> discord.Embed:
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_HELP,
        description=DiscordUIMessages.HELP_DESCRIPTION,
        color=discord.Color.purple(),
    )
    for command in sorted(app_cmds, key=lambda c: c.name):
        embed.add_field(name=f"/{command.name}", value=command.description or "-", inline=True)
    return embed


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    async def _play_query(self, interaction: discord.Interaction, query: str) -> PlayResult | None:
        """Run a play request for the invoking member; the interaction must already be deferred."""
        member = await ensure_user_in_voice(interaction)
        if member is None:
            return None

        assert interaction.guild is not None
        assert member.voice is not None and member.voice.channel is not None

        channel = interaction.channel
        if not isinstance(channel, discord.abc.Messageable):
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return None

        request = PlayRequest(
            guild_id=interaction.guild.id,
            voice_channel_id=member.voice.channel.id,
            user_id=member.id,
            user_name=member.display_name,
            query=query,
        )
        notifier = self.container.create_notifier(channel, interaction.guild.id)
        result = await self.container.play_handler.handle(request, notifier=notifier)

        await interaction.followup.send(result.message, ephemeral=not result.is_success)
        return result

    @app_commands.command(name="play", description="Play a song, playlist or album by URL or search.")
    @app_commands.describe(query="Search text, YouTube URL, or Spotify track/playlist/album link")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        # Resolution and voice connection can exceed the 3-second interaction deadline
        await interaction.response.defer()
        await self._play_query(interaction, query)

    @app_commands.command(name="search", description="Search YouTube and pick a result to play.")
    @app_commands.describe(query="What to search for")
    async def search(self, interaction: discord.Interaction, query: str) -> None:
        if await ensure_user_in_voice(interaction) is None:
            return

        await interaction.response.defer(ephemeral=True)

        try:
            entries = await self.container.primary_catalog.search(query, MAX_RESULTS)
        except DomainError as e:
            logger.warning(LogTemplates.SEARCH_FAILED, query, e)
            await interaction.followup.send(
                DiscordUIMessages.ERROR_DOMAIN.format(error=e.message), ephemeral=True
            )
            return

        if not entries:
            await interaction.followup.send(
                ErrorMessages.NOTHING_FOUND.format(query=query), ephemeral=True
            )
            return

        view = SearchResultsView(entries, user_id=interaction.user.id, on_choose=self._on_search_choice)
        message = await interaction.followup.send(
            DiscordUIMessages.SEARCH_RESULTS.format(query=query, count=len(view.entries)),
            view=view,
            ephemeral=True,
            wait=True,
        )
        view.set_message(message)

    @app_commands.command(name="join", description="Join your voice channel without queueing anything.")
    async def join(self, interaction: discord.Interaction) -> None:
        member = await ensure_user_in_voice(interaction)
        if member is None:
            return

        assert interaction.guild is not None
        assert member.voice is not None and member.voice.channel is not None

        channel = interaction.channel
        if not isinstance(channel, discord.abc.Messageable):
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        await interaction.response.defer()

        request = JoinRequest(guild_id=interaction.guild.id, voice_channel_id=member.voice.channel.id)
        notifier = self.container.create_notifier(channel, interaction.guild.id)
        try:
            await self.container.play_handler.join(request, notifier=notifier)
        except AlreadyExistsError:
            await interaction.followup.send(DiscordUIMessages.STATE_ALREADY_IN_VOICE, ephemeral=True)
            return
        except (OperationTimeoutError, UpstreamFailureError, InvalidStateError) as e:
            logger.warning(LogTemplates.PLAY_VOICE_FAILED, interaction.guild.id, e)
            await interaction.followup.send(DiscordUIMessages.ERROR_VOICE_CONNECT, ephemeral=True)
            return

        await interaction.followup.send(
            DiscordUIMessages.ACTION_JOINED.format(channel=member.voice.channel.name)
        )

    @app_commands.command(name="help", description="Show all available commands.")
    async def help(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(embed=build_help_embed(self.bot.tree.get_commands()))

    async def _on_search_choice(self, interaction: discord.Interaction, entry: CatalogEntry) -> None:
        await interaction.response.edit_message(
            content=DiscordUIMessages.SEARCH_SELECTED.format(title=entry.title or entry.url),
            view=None,
        )
        await self._play_query(interaction, entry.url)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
