"""Voice channel guard functions for Discord cogs."""

from zyra_music.infrastructure.discord.guards.voice_guards import (
    bot_voice_channel_id,
    check_user_in_voice,
    ensure_user_in_voice,
    get_member,
    send_ephemeral,
)

__all__ = [
    "bot_voice_channel_id",
    "check_user_in_voice",
    "ensure_user_in_voice",
    "get_member",
    "send_ephemeral",
]
