"""Session Registry - at most one live session queue per guild."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from ...config.settings import AudioSettings, VoiceSettings
from ...domain.music.value_objects import StopReason
from ...domain.shared.exceptions import AlreadyExistsError
from ...domain.shared.messages import LogTemplates
from .session_queue import SessionQueue

if TYPE_CHECKING:
    from ..interfaces.notifier import SessionNotifier
    from ..interfaces.streaming import StreamPipeline
    from ..interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)

RemovalListener = Callable[[int], None]


class SessionRegistry:
    """Owns every live session. A destroyed session removes itself on the way out."""

    def __init__(
        self,
        pipeline: StreamPipeline,
        *,
        audio_settings: AudioSettings | None = None,
        voice_settings: VoiceSettings | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._audio = audio_settings or AudioSettings()
        self._voice = voice_settings or VoiceSettings()
        self._sessions: dict[int, SessionQueue] = {}
        self._removal_listeners: list[RemovalListener] = []

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def sessions(self) -> Iterator[SessionQueue]:
        return iter(list(self._sessions.values()))

    def add_removal_listener(self, listener: RemovalListener) -> None:
        self._removal_listeners.append(listener)

    def get(self, guild_id: int) -> SessionQueue | None:
        return self._sessions.get(guild_id)

    def create(
        self,
        guild_id: int,
        *,
        transport: VoiceTransport,
        notifier: SessionNotifier,
    ) -> SessionQueue:
        """Register a new session for ``guild_id``.

        Raises:
            AlreadyExistsError: a live session already exists for the guild.
        """
        if guild_id in self._sessions:
            raise AlreadyExistsError("Session", guild_id)

        session = SessionQueue(
            guild_id,
            transport=transport,
            pipeline=self._pipeline,
            notifier=notifier,
            default_volume=self._audio.default_volume,
            progress_refresh_seconds=self._audio.progress_refresh_seconds,
            reconnect_window_seconds=self._voice.reconnect_window_seconds,
            on_destroyed=self._on_session_destroyed,
        )
        self._sessions[guild_id] = session
        logger.info(LogTemplates.REGISTRY_SESSION_CREATED, guild_id)
        return session

    def remove(self, guild_id: int) -> SessionQueue | None:
        """Forget the session for ``guild_id`` without stopping it."""
        session = self._sessions.pop(guild_id, None)
        if session is None:
            return None

        logger.info(LogTemplates.REGISTRY_SESSION_REMOVED, guild_id)
        for listener in self._removal_listeners:
            try:
                listener(guild_id)
            except Exception:
                logger.exception(LogTemplates.REGISTRY_LISTENER_FAILED, guild_id)
        return session

    def _on_session_destroyed(self, session: SessionQueue) -> None:
        # A newer session may already own the guild id.
        if self._sessions.get(session.guild_id) is session:
            self.remove(session.guild_id)

    async def shutdown(self) -> None:
        """Stop every live session."""
        for session in self.sessions():
            await session.stop(StopReason.SHUTDOWN)
        logger.info(LogTemplates.REGISTRY_SHUTDOWN)
