"""Session Queue - playback queue and state machine for one voice session.

The queue is modelled as ``current`` (the only item ever handed to the
stream pipeline) plus an ordered list of ``upcoming`` items. All mutation
happens on the event loop; transport callbacks are marshalled back onto it
before they reach this class.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ...domain.music.value_objects import RepeatMode, SessionState, StopReason
from ...domain.shared.exceptions import (
    InsufficientItemsError,
    InvalidStateError,
    NotFoundError,
    UpstreamFailureError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.validators import validate_in_range
from ...utils.reply import format_duration
from .session_models import NowPlayingSnapshot, QueueInfo

if TYPE_CHECKING:
    from ...domain.music.entities import MediaItem
    from ..interfaces.notifier import SessionNotifier
    from ..interfaces.streaming import AudioStream, StreamPipeline
    from ..interfaces.voice_transport import VoiceTransport

logger = logging.getLogger(__name__)

MIN_SHUFFLE_ITEMS = 3
MIN_VOLUME = 0
MAX_VOLUME = 100
RECONNECT_POLL_SECONDS = 0.25


class SessionQueue:
    """Owns one guild's queue, its audio stream and its voice transport."""

    def __init__(
        self,
        guild_id: int,
        *,
        transport: VoiceTransport,
        pipeline: StreamPipeline,
        notifier: SessionNotifier,
        default_volume: int = 50,
        progress_refresh_seconds: float = 15.0,
        reconnect_window_seconds: float = 5.0,
        on_destroyed: Callable[[SessionQueue], None] | None = None,
    ) -> None:
        self.guild_id = guild_id
        self.current: MediaItem | None = None
        self.upcoming: list[MediaItem] = []
        self.volume = validate_in_range(default_volume, "volume", MIN_VOLUME, MAX_VOLUME)
        self.repeat_mode = RepeatMode.OFF
        self.playing = False
        self.paused = False

        self._transport = transport
        self._pipeline = pipeline
        self._notifier = notifier
        self._progress_refresh_seconds = progress_refresh_seconds
        self._reconnect_window_seconds = reconnect_window_seconds
        self._on_destroyed = on_destroyed

        self._stream: AudioStream | None = None
        self._resource_started = False
        self._opening = False
        self._destroyed = False
        # Bumped whenever the current stream is abandoned; stale opens and
        # end-of-item callbacks compare against it and bail out.
        self._generation = 0

        self._display_handle: Any = None
        self._progress_task: asyncio.Task[None] | None = None

        self._started_at: float | None = None
        self._paused_at: float | None = None
        self._paused_total = 0.0

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        if self._destroyed:
            return SessionState.DESTROYED
        if self.playing:
            return SessionState.PAUSED if self.paused else SessionState.PLAYING
        return SessionState.IDLE

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def needs_start(self) -> bool:
        """True when items are queued but nothing is playing or being opened."""
        return not self._destroyed and not self.playing and not self._opening

    @property
    def current_item(self) -> MediaItem | None:
        return self.current

    @property
    def items(self) -> list[MediaItem]:
        head = [self.current] if self.current is not None else []
        return head + self.upcoming

    @property
    def queue_length(self) -> int:
        return len(self.upcoming) + (1 if self.current is not None else 0)

    @property
    def total_duration_seconds(self) -> int:
        return sum(item.duration_seconds for item in self.items)

    @property
    def formatted_total_duration(self) -> str:
        return format_duration(self.total_duration_seconds)

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else time.monotonic()
        return max(0.0, now - self._started_at - self._paused_total)

    def snapshot(self) -> NowPlayingSnapshot | None:
        if self.current is None:
            return None
        return NowPlayingSnapshot(
            guild_id=self.guild_id,
            item=self.current,
            elapsed_seconds=self.elapsed_seconds,
            volume=self.volume,
            repeat_mode=self.repeat_mode,
            paused=self.paused,
            upcoming_count=len(self.upcoming),
            next_item=self.upcoming[0] if self.upcoming else None,
        )

    def queue_info(self) -> QueueInfo:
        return QueueInfo(
            current_item=self.current,
            upcoming_items=list(self.upcoming),
            total_duration_seconds=self.total_duration_seconds,
            repeat_mode=self.repeat_mode,
            volume=self.volume,
        )

    # ─────────────────────────────────────────────────────────────────
    # Queue editing
    # ─────────────────────────────────────────────────────────────────

    def enqueue(self, item: MediaItem, position: int | None = None) -> int:
        """Add an item without starting playback.

        Returns the item's upcoming position (1 = next), or 0 when it became
        the current item of an empty queue. ``position`` inserts into the
        upcoming list instead of appending.
        """
        if self._destroyed:
            raise InvalidStateError("enqueue", self.state.value)

        if self.current is None and not self.upcoming:
            self.current = item
            return 0

        if position is None:
            self.upcoming.append(item)
            return len(self.upcoming)

        validate_in_range(position, "position", 1, len(self.upcoming) + 1)
        self.upcoming.insert(position - 1, item)
        return position

    def enqueue_all(self, items: list[MediaItem] | tuple[MediaItem, ...]) -> int:
        for item in items:
            self.enqueue(item)
        return len(items)

    def remove(self, position: int) -> MediaItem:
        """Remove an upcoming item by its 1-based position."""
        validate_in_range(position, "position", 1, len(self.upcoming))
        return self.upcoming.pop(position - 1)

    def move(self, from_position: int, to_position: int) -> MediaItem:
        """Move an upcoming item; both positions are 1-based over the upcoming list."""
        validate_in_range(from_position, "from_position", 1, len(self.upcoming))
        validate_in_range(to_position, "to_position", 1, len(self.upcoming))
        item = self.upcoming.pop(from_position - 1)
        self.upcoming.insert(to_position - 1, item)
        return item

    def shuffle(self) -> None:
        """Shuffle the upcoming items, leaving the current item in place."""
        if self.queue_length < MIN_SHUFFLE_ITEMS:
            raise InsufficientItemsError("shuffle", MIN_SHUFFLE_ITEMS, self.queue_length)
        random.shuffle(self.upcoming)

    def clear(self) -> int:
        """Drop every upcoming item, keeping the current one. Returns the count removed."""
        removed = len(self.upcoming)
        self.upcoming.clear()
        return removed

    def set_volume(self, volume: int) -> None:
        self.volume = validate_in_range(volume, "volume", MIN_VOLUME, MAX_VOLUME)
        if self._stream is not None:
            self._stream.set_volume(volume)

    def set_repeat_mode(self, mode: RepeatMode) -> None:
        self.repeat_mode = mode

    def cycle_repeat_mode(self) -> RepeatMode:
        self.repeat_mode = self.repeat_mode.next_mode()
        return self.repeat_mode

    # ─────────────────────────────────────────────────────────────────
    # Playback
    # ─────────────────────────────────────────────────────────────────

    async def play(self) -> None:
        """Open and start the current item, dropping items whose stream fails to open.

        Stops the session when nothing is left to play.
        """
        while not self._destroyed:
            if self.current is None:
                if not self.upcoming:
                    await self.stop(StopReason.QUEUE_FINISHED)
                    return
                self.current = self.upcoming.pop(0)

            item = self.current
            self._generation += 1
            generation = self._generation
            self._opening = True
            try:
                stream = await self._pipeline.open_stream(item, volume=self.volume)
            except Exception as e:
                if self._is_stale(generation, item):
                    return
                logger.warning(LogTemplates.SESSION_STREAM_FAILED, self.guild_id, item.title, e)
                await self._notify(
                    DiscordUIMessages.ERROR_PLAYING_ITEM.format(title=item.title, error=e)
                )
                self.current = None
                continue
            finally:
                if generation == self._generation:
                    self._opening = False

            if self._is_stale(generation, item):
                logger.debug(LogTemplates.SESSION_STALE_STREAM, self.guild_id, item.title)
                stream.cleanup()
                return

            try:
                self._start(stream, generation)
            except UpstreamFailureError as e:
                stream.cleanup()
                logger.warning(LogTemplates.SESSION_ATTACH_FAILED, self.guild_id, item.title, e)
                await self._notify(
                    DiscordUIMessages.ERROR_PLAYING_ITEM.format(title=item.title, error=e)
                )
                if self._is_stale(generation, item):
                    return
                if not self._transport.is_connected():
                    await self.stop(StopReason.DISCONNECT)
                    return
                self.current = None
                continue

            logger.info(LogTemplates.SESSION_PLAYING, self.guild_id, item.title)
            await self._replace_now_playing()
            self._start_progress_updates()
            return

    def _is_stale(self, generation: int, item: MediaItem) -> bool:
        return self._destroyed or generation != self._generation or self.current is not item

    def _start(self, stream: AudioStream, generation: int) -> None:
        """Hand ``stream`` to the transport, then mark the session as playing.

        Nothing is committed when the transport refuses the stream.
        """

        async def on_end(error: Exception | None) -> None:
            await self._handle_item_end(generation, error)

        self._transport.attach(stream, on_end)

        self._stream = stream
        self._resource_started = True
        self.playing = True
        self.paused = False
        self._started_at = time.monotonic()
        self._paused_at = None
        self._paused_total = 0.0

    async def _handle_item_end(self, generation: int, error: Exception | None) -> None:
        if generation != self._generation or self._destroyed:
            logger.debug(LogTemplates.SESSION_STALE_END, self.guild_id)
            return

        if error is not None:
            title = self.current.title if self.current else "?"
            logger.warning(LogTemplates.SESSION_PLAYBACK_ERROR, self.guild_id, title, error)
            await self._notify(DiscordUIMessages.ERROR_PLAYBACK.format(title=title, error=error))

        await self.process_queue()

    async def process_queue(self) -> None:
        """Advance after the current item ends, according to the repeat mode."""
        if self._destroyed or not (self.playing and self._resource_started):
            logger.debug(LogTemplates.SESSION_SPURIOUS_END, self.guild_id)
            return

        self._release_stream()
        finished = self.current

        if self.repeat_mode is RepeatMode.ALL and finished is not None:
            self.upcoming.append(finished)
            self.current = self.upcoming.pop(0)
        elif self.repeat_mode is RepeatMode.OFF:
            self.current = self.upcoming.pop(0) if self.upcoming else None

        if self.current is None:
            logger.info(LogTemplates.SESSION_QUEUE_FINISHED, self.guild_id)
            await self._notify(DiscordUIMessages.STATE_QUEUE_FINISHED)
            await self.stop(StopReason.QUEUE_FINISHED)
            return

        await self.play()

    def pause(self) -> None:
        self.paused = True
        if self._paused_at is None:
            self._paused_at = time.monotonic()
        self._transport.pause()

    def resume(self) -> None:
        self.paused = False
        if self._paused_at is not None:
            self._paused_total += time.monotonic() - self._paused_at
            self._paused_at = None
        self._transport.resume()

    def skip(self) -> None:
        """End the current item now; completion handling runs as for a natural end."""
        if self._resource_started:
            self._transport.stop()

    async def skip_to(self, position: int) -> MediaItem:
        """Drop every item before ``position`` (1 = current) and start that item."""
        items = self.items
        validate_in_range(position, "position", 1, len(items))

        target = items[position - 1]
        self._halt()
        self.current = target
        self.upcoming = items[position:]
        await self.play()
        return target

    def _halt(self) -> None:
        """Abandon the current stream without triggering completion handling."""
        self._generation += 1
        self._opening = False
        self._stop_progress_updates()
        if self._resource_started:
            self._transport.stop()
        self._release_stream()

    def _release_stream(self) -> None:
        if self._stream is not None:
            self._stream.cleanup()
        self._stream = None
        self._resource_started = False
        self.playing = False
        self.paused = False
        self._started_at = None
        self._paused_at = None
        self._paused_total = 0.0

    async def stop(self, reason: StopReason = StopReason.USER_REQUEST) -> None:
        """Clear the queue, halt audio and release the transport. Idempotent."""
        if self._destroyed:
            return

        self._destroyed = True
        if self._on_destroyed is not None:
            self._on_destroyed(self)

        self.current = None
        self.upcoming.clear()
        self._halt()

        try:
            await self._transport.destroy()
        except UpstreamFailureError as e:
            logger.warning(LogTemplates.SESSION_TRANSPORT_DESTROY_FAILED, self.guild_id, e)

        if self._display_handle is not None:
            handle, self._display_handle = self._display_handle, None
            await self._delete_display(handle)

        logger.info(LogTemplates.SESSION_STOPPED, self.guild_id, reason.value)

    async def handle_transport_lost(self) -> bool:
        """Wait for the transport to reconnect; stop the session if it does not.

        Returns True if the connection came back within the window.
        """
        if self._destroyed:
            return False

        logger.warning(
            LogTemplates.SESSION_TRANSPORT_LOST, self.guild_id, self._reconnect_window_seconds
        )
        try:
            async with asyncio.timeout(self._reconnect_window_seconds):
                while not self._transport.is_connected():
                    await asyncio.sleep(RECONNECT_POLL_SECONDS)
        except TimeoutError:
            await self.stop(StopReason.DISCONNECT)
            return False

        logger.info(LogTemplates.SESSION_TRANSPORT_RECOVERED, self.guild_id)
        return True

    # ─────────────────────────────────────────────────────────────────
    # Text channel (best-effort)
    # ─────────────────────────────────────────────────────────────────

    async def _notify(self, content: str) -> None:
        try:
            await self._notifier.send(content)
        except Exception as e:
            logger.warning(LogTemplates.SESSION_NOTIFY_FAILED, self.guild_id, e)

    async def _replace_now_playing(self) -> None:
        snapshot = self.snapshot()
        if snapshot is None:
            return

        previous, self._display_handle = self._display_handle, None
        try:
            self._display_handle = await self._notifier.show_now_playing(snapshot)
        except Exception as e:
            logger.warning(LogTemplates.SESSION_DISPLAY_FAILED, self.guild_id, e)

        if previous is not None:
            await self._delete_display(previous)

    async def _delete_display(self, handle: Any) -> None:
        try:
            await self._notifier.delete_now_playing(handle)
        except NotFoundError:
            logger.debug(LogTemplates.SESSION_DISPLAY_GONE, self.guild_id)
        except Exception as e:
            logger.warning(LogTemplates.SESSION_DISPLAY_FAILED, self.guild_id, e)

    def _start_progress_updates(self) -> None:
        self._stop_progress_updates()
        self._progress_task = asyncio.create_task(
            self._progress_loop(), name=f"now-playing-{self.guild_id}"
        )

    def _stop_progress_updates(self) -> None:
        if self._progress_task is not None and not self._progress_task.done():
            self._progress_task.cancel()
        self._progress_task = None

    async def _progress_loop(self) -> None:
        while True:
            await asyncio.sleep(self._progress_refresh_seconds)
            snapshot = self.snapshot()
            if self._display_handle is None or snapshot is None:
                return
            try:
                await self._notifier.refresh_now_playing(self._display_handle, snapshot)
            except NotFoundError:
                logger.debug(LogTemplates.SESSION_DISPLAY_GONE, self.guild_id)
                self._display_handle = None
                return
            except Exception as e:
                logger.warning(LogTemplates.SESSION_DISPLAY_FAILED, self.guild_id, e)
