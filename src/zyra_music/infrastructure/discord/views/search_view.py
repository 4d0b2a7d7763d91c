"""Select menu listing search results; choosing one plays it."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import discord

from zyra_music.domain.music.entities import CatalogEntry
from zyra_music.infrastructure.discord.views.base_view import BaseInteractiveView
from zyra_music.utils.reply import format_duration, truncate

MAX_RESULTS = 10

ChooseCallback = Callable[[discord.Interaction, CatalogEntry], Awaitable[None]]


class SearchResultsView(BaseInteractiveView):
    def __init__(
        self,
        entries: list[CatalogEntry],
        *,
        user_id: int,
        on_choose: ChooseCallback,
        timeout: float = 60.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.entries = entries[:MAX_RESULTS]
        self.user_id = user_id
        self._on_choose = on_choose

        options = [
            discord.SelectOption(
                label=truncate(entry.title or entry.url, 100),
                value=str(index),
                description=truncate(
                    f"{entry.uploader or 'Unknown'} • {format_duration(entry.duration_seconds)}", 100
                ),
            )
            for index, entry in enumerate(self.entries)
        ]
        self._select: discord.ui.Select[SearchResultsView] = discord.ui.Select(
            placeholder="Pick a result to play…", options=options
        )
        self._select.callback = self._on_select
        self.add_item(self._select)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return interaction.user.id == self.user_id

    async def _on_select(self, interaction: discord.Interaction) -> None:
        entry = self.entries[int(self._select.values[0])]
        self._disable_items()
        self.stop()
        await self._on_choose(interaction, entry)

    async def on_timeout(self) -> None:
        self._disable_items()
        await self._try_edit_message()
