"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog.
"""

from __future__ import annotations

import discord

from zyra_music.domain.shared.messages import DiscordUIMessages


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    return user


def bot_voice_channel_id(guild: discord.Guild) -> int | None:
    vc = guild.voice_client
    if vc is not None and vc.channel is not None:
        return vc.channel.id
    return None


async def ensure_user_in_voice(interaction: discord.Interaction) -> discord.Member | None:
    """Check the user is in a voice channel, and in the bot's channel if it has one.

    Returns the member on success; sends an ephemeral rejection and returns None otherwise.
    """
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return None

    assert interaction.guild is not None
    bot_channel_id = bot_voice_channel_id(interaction.guild)
    if bot_channel_id is not None and member.voice.channel.id != bot_channel_id:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_BE_IN_VOICE)
        return None

    return member


async def check_user_in_voice(interaction: discord.Interaction, guild_id: int) -> bool:
    """Return True if the interacting user is in the bot's voice channel.

    Sends an ephemeral rejection and returns False otherwise.
    Used as an ``interaction_check`` in views that require voice presence.
    """
    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return False

    if not user.voice or not user.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
        return False

    guild = interaction.client.get_guild(guild_id)
    if guild is not None:
        bot_channel_id = bot_voice_channel_id(guild)
        if bot_channel_id is not None and user.voice.channel.id != bot_channel_id:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_BE_IN_VOICE)
            return False

    return True
