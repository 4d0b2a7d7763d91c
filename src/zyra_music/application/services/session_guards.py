"""State checks shared by every command that operates on an existing session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...domain.music.value_objects import SessionState
from ...domain.shared.exceptions import InvalidStateError

if TYPE_CHECKING:
    from .session_queue import SessionQueue
    from .session_registry import SessionRegistry


def require_session(registry: SessionRegistry, guild_id: int, operation: str) -> SessionQueue:
    session = registry.get(guild_id)
    if session is None or session.is_destroyed:
        raise InvalidStateError(operation, SessionState.DESTROYED.value)
    return session


def require_active(registry: SessionRegistry, guild_id: int, operation: str) -> SessionQueue:
    """Return the guild's session if something is playing or paused."""
    session = require_session(registry, guild_id, operation)
    if not session.state.is_active:
        raise InvalidStateError(operation, session.state.value)
    return session


def require_playing(registry: SessionRegistry, guild_id: int, operation: str) -> SessionQueue:
    session = require_session(registry, guild_id, operation)
    if session.state is not SessionState.PLAYING:
        raise InvalidStateError(operation, session.state.value)
    return session


def require_paused(registry: SessionRegistry, guild_id: int, operation: str) -> SessionQueue:
    session = require_session(registry, guild_id, operation)
    if session.state is not SessionState.PAUSED:
        raise InvalidStateError(operation, session.state.value)
    return session
