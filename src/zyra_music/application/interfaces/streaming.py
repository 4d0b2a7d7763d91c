"""Port interface for turning a media locator into live audio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ...domain.shared.types import VolumePercent

if TYPE_CHECKING:
    from ...domain.music.entities import MediaItem


class AudioStream(ABC):
    """A live audio source handed to the voice transport."""

    @abstractmethod
    def set_volume(self, volume: VolumePercent) -> None:
        """Apply a 0-100 volume immediately."""
        ...

    @abstractmethod
    def cleanup(self) -> None:
        """Release the underlying process or file handles."""
        ...


class StreamPipeline(ABC):
    """Interface for the external media pipeline."""

    @abstractmethod
    async def open_stream(self, item: "MediaItem", *, volume: VolumePercent) -> AudioStream:
        """Open a live stream for ``item``.

        Raises:
            UpstreamFailureError: the locator could not be turned into audio.
        """
        ...
