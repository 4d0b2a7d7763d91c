"""Now-playing button panel: pause/resume, skip, stop, shuffle, loop and volume."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from zyra_music.application.services.session_guards import require_active, require_session
from zyra_music.domain.music.value_objects import StopReason
from zyra_music.domain.shared.exceptions import DomainError
from zyra_music.domain.shared.messages import DiscordUIMessages, LogTemplates
from zyra_music.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    send_ephemeral,
)
from zyra_music.infrastructure.discord.views.base_view import BaseInteractiveView
from zyra_music.utils.reply import volume_slider

if TYPE_CHECKING:
    from ....application.services.session_queue import SessionQueue
    from ....config.container import Container

logger = logging.getLogger(__name__)

VOLUME_STEP = 10


def clamp_volume(volume: int) -> int:
    return max(0, min(100, volume))


class NowPlayingView(BaseInteractiveView):
    """Buttons attached to the now-playing panel of one guild's session."""

    def __init__(self, *, guild_id: int, container: Container, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        self.guild_id = guild_id
        self.container = container

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_user_in_voice(interaction, self.guild_id)

    def _session(self, operation: str, *, active: bool = True) -> SessionQueue:
        registry = self.container.session_registry
        if active:
            return require_active(registry, self.guild_id, operation)
        return require_session(registry, self.guild_id, operation)

    async def on_error(
        self,
        interaction: discord.Interaction,
        error: Exception,
        item: discord.ui.Item[NowPlayingView],
    ) -> None:
        if isinstance(error, DomainError):
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_DOMAIN.format(error=error.message))
            return
        logger.exception(LogTemplates.VIEW_BUTTON_ERROR, self.guild_id, exc_info=error)
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_OCCURRED.format(error=error))

    @discord.ui.button(label="⏯️", style=discord.ButtonStyle.secondary)
    async def toggle_pause_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        session = self._session("pause")
        if session.paused:
            session.resume()
            await send_ephemeral(interaction, DiscordUIMessages.ACTION_RESUMED)
        else:
            session.pause()
            await send_ephemeral(interaction, DiscordUIMessages.ACTION_PAUSED)

    @discord.ui.button(label="⏭️", style=discord.ButtonStyle.secondary)
    async def skip_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        session = self._session("skip")
        session.skip()
        await send_ephemeral(interaction, DiscordUIMessages.ACTION_SKIPPED)

    @discord.ui.button(label="⏹️", style=discord.ButtonStyle.danger)
    async def stop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        session = self._session("stop", active=False)
        # Defer first; stopping deletes the message this view is attached to.
        await interaction.response.defer(ephemeral=True)
        await session.stop(StopReason.USER_REQUEST)
        self.stop()
        await interaction.followup.send(DiscordUIMessages.ACTION_STOPPED, ephemeral=True)

    @discord.ui.button(label="🔀", style=discord.ButtonStyle.secondary)
    async def shuffle_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        session = self._session("shuffle", active=False)
        session.shuffle()
        await send_ephemeral(interaction, DiscordUIMessages.ACTION_SHUFFLED)

    @discord.ui.button(label="🔁", style=discord.ButtonStyle.secondary)
    async def loop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        session = self._session("loop", active=False)
        mode = session.cycle_repeat_mode()
        await send_ephemeral(
            interaction,
            DiscordUIMessages.ACTION_LOOP_MODE_CHANGED.format(emoji=mode.emoji, mode=mode.value),
        )

    @discord.ui.button(label="🔉 -10", style=discord.ButtonStyle.secondary, row=1)
    async def volume_down_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        await self._change_volume(interaction, -VOLUME_STEP)

    @discord.ui.button(label="🔊 +10", style=discord.ButtonStyle.secondary, row=1)
    async def volume_up_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        await self._change_volume(interaction, VOLUME_STEP)

    async def _change_volume(self, interaction: discord.Interaction, delta: int) -> None:
        session = self._session("volume", active=False)
        session.set_volume(clamp_volume(session.volume + delta))
        await send_ephemeral(
            interaction,
            DiscordUIMessages.ACTION_VOLUME_SET.format(
                volume=session.volume, slider=volume_slider(session.volume)
            ),
        )
