"""Discord UI views and components."""

from __future__ import annotations

from zyra_music.infrastructure.discord.views.base_view import BaseInteractiveView
from zyra_music.infrastructure.discord.views.now_playing_view import NowPlayingView
from zyra_music.infrastructure.discord.views.search_view import SearchResultsView

__all__ = [
    "BaseInteractiveView",
    "NowPlayingView",
    "SearchResultsView",
]
