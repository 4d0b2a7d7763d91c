"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class SessionState(Enum):
    """Lifecycle state of a session queue.

    State transitions:
    - IDLE -> PLAYING (play)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> IDLE (queue exhausted, between items)
    - Any -> DESTROYED (stop, transport loss, shutdown)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    DESTROYED = "destroyed"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionState.IDLE: {SessionState.PLAYING, SessionState.DESTROYED},
            SessionState.PLAYING: {
                SessionState.PAUSED,
                SessionState.IDLE,
                SessionState.DESTROYED,
            },
            SessionState.PAUSED: {
                SessionState.PLAYING,
                SessionState.IDLE,
                SessionState.DESTROYED,
            },
            SessionState.DESTROYED: set(),
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {SessionState.PLAYING, SessionState.PAUSED}


class RepeatMode(Enum):
    """What happens to the current item when it finishes."""

    OFF = "off"
    SINGLE = "single"  # replay the current item
    ALL = "all"  # rotate the current item to the back of the queue

    def next_mode(self) -> RepeatMode:
        """Cycle to next repeat mode."""
        modes = list(RepeatMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]

    @property
    def emoji(self) -> str:
        return {
            RepeatMode.OFF: "➡️",
            RepeatMode.SINGLE: "🔂",
            RepeatMode.ALL: "🔁",
        }[self]


class CatalogOrigin(Enum):
    """Catalog a media item was resolved from."""

    PRIMARY = "primary"  # video platform
    SECONDARY = "secondary"  # music-metadata platform


class StopReason(Enum):
    """Reasons a session can be torn down."""

    USER_REQUEST = "user_request"
    QUEUE_FINISHED = "queue_finished"
    DISCONNECT = "disconnect"
    SHUTDOWN = "shutdown"
