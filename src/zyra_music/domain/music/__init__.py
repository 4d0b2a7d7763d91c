"""
Music Bounded Context

Media items, collections and the value objects describing session playback.
"""

from zyra_music.domain.music.entities import CatalogEntry, Collection, MediaItem, TrackMetadata
from zyra_music.domain.music.value_objects import (
    CatalogOrigin,
    RepeatMode,
    SessionState,
    StopReason,
)

__all__ = [
    # Entities
    "MediaItem",
    "Collection",
    "TrackMetadata",
    "CatalogEntry",
    # Value Objects
    "CatalogOrigin",
    "RepeatMode",
    "SessionState",
    "StopReason",
]
