"""
Application Commands

Request objects and their handlers for operations that change session state.
"""

from zyra_music.application.commands.play_media import (
    JoinRequest,
    PlayHandler,
    PlayRequest,
    PlayResult,
    PlayStatus,
)

__all__ = [
    "JoinRequest",
    "PlayHandler",
    "PlayRequest",
    "PlayResult",
    "PlayStatus",
]
