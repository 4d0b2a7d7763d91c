"""Background resolution of the deferred members of an imported collection."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...config.settings import CollectionSettings
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import TrackMetadata
    from .catalog_resolver import CatalogResolver
    from .session_queue import SessionQueue
    from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class CollectionFillManager:
    """Resolves deferred collection tracks one at a time and appends the matches.

    A fill job only ever writes to the session it was started for. It stops on
    its own once that session is destroyed or replaced in the registry.
    """

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        resolver: CatalogResolver,
        settings: CollectionSettings | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._settings = settings or CollectionSettings()
        self._tasks: dict[int, set[asyncio.Task[int]]] = {}
        registry.add_removal_listener(self.cancel)

    def active_jobs(self, guild_id: int) -> int:
        return sum(1 for task in self._tasks.get(guild_id, ()) if not task.done())

    def start(
        self,
        session: SessionQueue,
        tracks: list[TrackMetadata] | tuple[TrackMetadata, ...],
        *,
        requester_id: int | None = None,
        requester_name: str | None = None,
    ) -> asyncio.Task[int] | None:
        if not tracks:
            return None

        guild_id = session.guild_id
        task = asyncio.create_task(
            self._run(session, list(tracks), requester_id, requester_name),
            name=f"collection-fill-{guild_id}",
        )
        self._tasks.setdefault(guild_id, set()).add(task)
        task.add_done_callback(lambda t: self._forget(guild_id, t))
        logger.info(LogTemplates.FILL_STARTED, guild_id, len(tracks))
        return task

    def _forget(self, guild_id: int, task: asyncio.Task[int]) -> None:
        tasks = self._tasks.get(guild_id)
        if tasks is None:
            return
        tasks.discard(task)
        if not tasks:
            del self._tasks[guild_id]

    def cancel(self, guild_id: int) -> int:
        """Cancel every fill job for ``guild_id``; returns how many were running."""
        tasks = self._tasks.pop(guild_id, set())
        current = asyncio.current_task()
        cancelled = 0
        for task in tasks:
            # A job that tore the session down itself exits via its liveness check.
            if task is not current and not task.done():
                task.cancel()
                cancelled += 1
        if cancelled:
            logger.info(LogTemplates.FILL_CANCELLED, guild_id, cancelled)
        return cancelled

    async def shutdown(self) -> None:
        tasks = [task for group in self._tasks.values() for task in group]
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _is_live(self, session: SessionQueue) -> bool:
        return not session.is_destroyed and self._registry.get(session.guild_id) is session

    async def _run(
        self,
        session: SessionQueue,
        tracks: list[TrackMetadata],
        requester_id: int | None,
        requester_name: str | None,
    ) -> int:
        added = 0
        try:
            for index, track in enumerate(tracks):
                if index and self._settings.fill_delay_seconds:
                    await asyncio.sleep(self._settings.fill_delay_seconds)
                if not self._is_live(session):
                    break

                item = await self._resolver.resolve_best_match(track)
                if item is None:
                    logger.debug(LogTemplates.FILL_NO_MATCH, session.guild_id, track.display_name)
                    continue
                if not self._is_live(session):
                    break

                if requester_id is not None and requester_name:
                    item = item.with_requester(requester_id, requester_name)
                session.enqueue(item)
                added += 1

                if session.needs_start:
                    await session.play()
        except asyncio.CancelledError:
            logger.info(LogTemplates.FILL_INTERRUPTED, session.guild_id, added)
            raise

        logger.info(LogTemplates.FILL_FINISHED, session.guild_id, added, len(tracks))
        return added
