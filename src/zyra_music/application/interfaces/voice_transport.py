"""Port interfaces for the realtime voice connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ...domain.shared.types import ChannelIdField, DiscordSnowflake

if TYPE_CHECKING:
    from .streaming import AudioStream

ItemEndCallback = Callable[[Exception | None], Awaitable[None]]


class VoiceTransport(ABC):
    """A joined voice connection owned by exactly one session."""

    @abstractmethod
    def attach(self, stream: "AudioStream", on_end: ItemEndCallback) -> None:
        """Start sending ``stream``; ``on_end`` is awaited on the event loop when it ends."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """End the current stream; the ``on_end`` callback still fires."""
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def resume(self) -> None:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def destroy(self) -> None:
        """Leave the voice channel. Safe to call more than once."""
        ...


class VoiceConnector(ABC):
    """Joins voice channels on behalf of new sessions."""

    @abstractmethod
    async def join(self, guild_id: DiscordSnowflake, channel_id: ChannelIdField) -> VoiceTransport:
        """Join a voice channel.

        Raises:
            OperationTimeoutError: the connection was not ready in time.
            UpstreamFailureError: the platform refused the connection.
        """
        ...
