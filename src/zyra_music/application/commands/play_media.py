"""Command and handler for playing a query, URL or collection."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from ...domain.music.entities import Collection, MediaItem
from ...domain.shared.exceptions import (
    AlreadyExistsError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    OperationTimeoutError,
    UnsupportedInputError,
    UpstreamFailureError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake, NonEmptyStr, NonNegativeInt

if TYPE_CHECKING:
    from ..interfaces.notifier import SessionNotifier
    from ..interfaces.voice_transport import VoiceConnector
    from ..services.collection_fill import CollectionFillManager
    from ..services.media_locator import MediaLocatorService
    from ..services.session_queue import SessionQueue
    from ..services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class PlayStatus(Enum):
    """Status codes for play results."""

    NOW_PLAYING = "now_playing"
    QUEUED = "queued"
    COLLECTION_QUEUED = "collection_queued"
    NOT_FOUND = "not_found"
    UNSUPPORTED = "unsupported"
    RESOLUTION_ERROR = "resolution_error"
    VOICE_ERROR = "voice_error"


class PlayRequest(BaseModel):
    """Request to resolve a query, queue the result and start playback if idle."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    user_id: DiscordSnowflake
    user_name: NonEmptyStr
    query: NonEmptyStr

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class JoinRequest(BaseModel):
    """Request to connect to a voice channel and open an empty session."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake


class PlayResult(BaseModel):
    """Outcome of a play request, ready to be rendered for the user."""

    model_config = ConfigDict(frozen=True)

    status: PlayStatus
    message: str
    item: MediaItem | None = None
    collection_title: str | None = None
    added_count: NonNegativeInt = 0
    pending_count: NonNegativeInt = 0
    queue_position: NonNegativeInt | None = None
    queue_length: NonNegativeInt = 0

    @property
    def is_success(self) -> bool:
        return self.status in {
            PlayStatus.NOW_PLAYING,
            PlayStatus.QUEUED,
            PlayStatus.COLLECTION_QUEUED,
        }

    @classmethod
    def for_item(cls, item: MediaItem, position: int, queue_length: int) -> PlayResult:
        if position == 0:
            return cls(
                status=PlayStatus.NOW_PLAYING,
                message=DiscordUIMessages.NOW_PLAYING_ITEM.format(title=item.title),
                item=item,
                queue_position=0,
                queue_length=queue_length,
            )
        return cls(
            status=PlayStatus.QUEUED,
            message=DiscordUIMessages.QUEUED_ITEM.format(title=item.title, position=position),
            item=item,
            queue_position=position,
            queue_length=queue_length,
        )

    @classmethod
    def for_collection(cls, collection: Collection, queue_length: int) -> PlayResult:
        return cls(
            status=PlayStatus.COLLECTION_QUEUED,
            message=DiscordUIMessages.QUEUED_COLLECTION.format(
                title=collection.title,
                count=len(collection.items),
                pending=len(collection.deferred),
            ),
            collection_title=collection.title,
            added_count=len(collection.items),
            pending_count=len(collection.deferred),
            queue_length=queue_length,
        )

    @classmethod
    def error(cls, status: PlayStatus, message: str) -> PlayResult:
        return cls(status=status, message=message)


class PlayHandler:
    """Resolves a request, makes sure a session exists and feeds it."""

    def __init__(
        self,
        *,
        locator: MediaLocatorService,
        registry: SessionRegistry,
        connector: VoiceConnector,
        fill_manager: CollectionFillManager,
    ) -> None:
        self._locator = locator
        self._registry = registry
        self._connector = connector
        self._fill = fill_manager

    async def handle(self, request: PlayRequest, *, notifier: SessionNotifier) -> PlayResult:
        try:
            resolved = await self._locator.resolve(
                request.query,
                requester_id=request.user_id,
                requester_name=request.user_name,
            )
        except NotFoundError as e:
            return PlayResult.error(PlayStatus.NOT_FOUND, e.message)
        except UnsupportedInputError as e:
            return PlayResult.error(PlayStatus.UNSUPPORTED, e.message)
        except DomainError as e:
            logger.warning(LogTemplates.PLAY_RESOLVE_FAILED, request.query, e)
            return PlayResult.error(
                PlayStatus.RESOLUTION_ERROR,
                DiscordUIMessages.ERROR_RESOLVING.format(error=e.message),
            )

        try:
            session, created = await self._obtain_session(
                request.guild_id, request.voice_channel_id, notifier
            )
        except (OperationTimeoutError, UpstreamFailureError, InvalidStateError) as e:
            logger.warning(LogTemplates.PLAY_VOICE_FAILED, request.guild_id, e)
            return PlayResult.error(PlayStatus.VOICE_ERROR, DiscordUIMessages.ERROR_VOICE_CONNECT)

        if isinstance(resolved, Collection):
            session.enqueue_all(resolved.items)
            result = PlayResult.for_collection(resolved, session.queue_length)
        else:
            position = session.enqueue(resolved)
            result = PlayResult.for_item(resolved, position, session.queue_length)

        if created or session.needs_start:
            await session.play()

        if isinstance(resolved, Collection) and resolved.has_deferred:
            self._fill.start(
                session,
                resolved.deferred,
                requester_id=request.user_id,
                requester_name=request.user_name,
            )

        return result

    async def join(self, request: JoinRequest, *, notifier: SessionNotifier) -> SessionQueue:
        """Connect and open an empty session.

        Raises ``AlreadyExistsError`` when the guild already has a live session,
        and lets voice failures propagate.
        """
        session, created = await self._obtain_session(
            request.guild_id, request.voice_channel_id, notifier
        )
        if not created:
            raise AlreadyExistsError("session", request.guild_id)
        logger.info(LogTemplates.PLAY_JOINED, request.voice_channel_id, request.guild_id)
        return session

    async def _obtain_session(
        self, guild_id: int, channel_id: int, notifier: SessionNotifier
    ) -> tuple[SessionQueue, bool]:
        session = self._registry.get(guild_id)
        if session is not None and not session.is_destroyed:
            return session, False

        transport = await self._connector.join(guild_id, channel_id)

        # Another command may have created the session while we were joining;
        # the connector reuses the guild's voice connection, so just use it.
        session = self._registry.get(guild_id)
        if session is not None and not session.is_destroyed:
            return session, False

        try:
            return self._registry.create(guild_id, transport=transport, notifier=notifier), True
        except AlreadyExistsError:
            existing = self._registry.get(guild_id)
            if existing is None:
                logger.error(LogTemplates.PLAY_SESSION_LOST, guild_id)
                raise InvalidStateError("create session", "missing") from None
            return existing, False
