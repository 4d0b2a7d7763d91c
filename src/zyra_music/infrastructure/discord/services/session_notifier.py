"""Posts session status and the now-playing panel to a guild text channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import discord

from zyra_music.application.interfaces.notifier import SessionNotifier
from zyra_music.domain.shared.exceptions import NotFoundError, UpstreamFailureError
from zyra_music.domain.shared.messages import DiscordUIMessages, LogTemplates
from zyra_music.utils.reply import format_progress, truncate

if TYPE_CHECKING:
    from ....application.services.session_models import NowPlayingSnapshot
    from ....domain.music.entities import MediaItem

logger = logging.getLogger(__name__)

SERVICE_NAME = "discord"

ViewFactory = Callable[["NowPlayingSnapshot"], discord.ui.View]


def format_requester(item: MediaItem) -> str:
    if item.requested_by_id:
        return f"<@{item.requested_by_id}>"
    if item.requested_by_name:
        return item.requested_by_name
    return "Unknown"


def build_now_playing_embed(snapshot: NowPlayingSnapshot) -> discord.Embed:
    item = snapshot.item

    description_lines = [f"[{truncate(item.title, 200)}]({item.source_url})"]
    description_lines.append(f"Requested by: {format_requester(item)}")
    description_lines.append("")
    description_lines.append(
        format_progress(snapshot.elapsed_seconds, item.duration_seconds)
    )

    title = DiscordUIMessages.EMBED_PAUSED if snapshot.paused else DiscordUIMessages.EMBED_NOW_PLAYING
    embed = discord.Embed(
        title=title,
        description="\n".join(description_lines),
        color=discord.Color.orange() if snapshot.paused else discord.Color.green(),
    )

    if item.thumbnail_url:
        embed.set_thumbnail(url=item.thumbnail_url)

    if item.uploader:
        embed.add_field(name="\U0001f464 Channel", value=truncate(item.uploader, 64), inline=True)

    embed.add_field(name="\U0001f50a Volume", value=f"{snapshot.volume}%", inline=True)
    embed.add_field(
        name=f"{snapshot.repeat_mode.emoji} Loop",
        value=snapshot.repeat_mode.value.title(),
        inline=True,
    )

    if snapshot.next_item is not None:
        next_up = truncate(snapshot.next_item.title, 60)
        if snapshot.upcoming_count > 1:
            next_up += DiscordUIMessages.UP_NEXT_MORE.format(count=snapshot.upcoming_count - 1)
    else:
        next_up = DiscordUIMessages.UP_NEXT_NONE
    embed.add_field(name="⏭️ Next Up", value=next_up, inline=False)

    return embed


class DiscordSessionNotifier(SessionNotifier):
    """SessionNotifier bound to the text channel a session was started from."""

    def __init__(
        self,
        channel: discord.abc.Messageable,
        *,
        view_factory: ViewFactory | None = None,
    ) -> None:
        self._channel = channel
        self._view_factory = view_factory

    async def send(self, content: str) -> None:
        try:
            await self._channel.send(content)
        except discord.HTTPException as e:
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

    async def show_now_playing(self, snapshot: NowPlayingSnapshot) -> discord.Message:
        embed = build_now_playing_embed(snapshot)
        view = self._view_factory(snapshot) if self._view_factory else None
        try:
            if view is not None:
                message = await self._channel.send(embed=embed, view=view)
            else:
                message = await self._channel.send(embed=embed)
        except discord.HTTPException as e:
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

        set_message = getattr(view, "set_message", None)
        if set_message is not None:
            set_message(message)
        return message

    async def refresh_now_playing(
        self, handle: discord.Message, snapshot: NowPlayingSnapshot
    ) -> None:
        try:
            await handle.edit(embed=build_now_playing_embed(snapshot))
        except discord.NotFound as e:
            raise NotFoundError(DiscordUIMessages.DISPLAY_GONE) from e
        except discord.HTTPException as e:
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e

    async def delete_now_playing(self, handle: discord.Message) -> None:
        try:
            await handle.delete()
        except discord.NotFound as e:
            raise NotFoundError(DiscordUIMessages.DISPLAY_GONE) from e
        except discord.HTTPException as e:
            logger.debug(LogTemplates.NOTIFIER_DELETE_FAILED, handle.id, e)
            raise UpstreamFailureError(SERVICE_NAME, str(e)) from e
