"""Port interface for the text channel a session reports to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..services.session_models import NowPlayingSnapshot


class SessionNotifier(ABC):
    """Best-effort status messages and the now-playing display."""

    @abstractmethod
    async def send(self, content: str) -> None:
        ...

    @abstractmethod
    async def show_now_playing(self, snapshot: "NowPlayingSnapshot") -> Any:
        """Post a now-playing display and return a handle for later updates."""
        ...

    @abstractmethod
    async def refresh_now_playing(self, handle: Any, snapshot: "NowPlayingSnapshot") -> None:
        ...

    @abstractmethod
    async def delete_now_playing(self, handle: Any) -> None:
        """Remove a display.

        Raises:
            NotFoundError: the display was already removed.
        """
        ...
