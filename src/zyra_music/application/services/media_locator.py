"""Media Locator Service - turns a user query into playable items."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from ...config.settings import CollectionSettings
from ...domain.music.entities import CatalogEntry, Collection, MediaItem, TrackMetadata
from ...domain.music.value_objects import CatalogOrigin
from ...domain.shared.exceptions import DomainError, NotFoundError, UnsupportedInputError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ..interfaces.catalog import CatalogReference, ReferenceKind

if TYPE_CHECKING:
    from ..interfaces.catalog import PrimaryCatalog, SecondaryCatalog
    from .catalog_resolver import CatalogResolver

logger = logging.getLogger(__name__)

# Mixes, liked videos and watch-later lists only exist inside the owner's session.
PERSONALIZED_PLAYLIST_PREFIXES: Final[tuple[str, ...]] = ("RD", "LL", "WL")


def is_personalized_playlist(list_id: str) -> bool:
    return list_id.startswith(PERSONALIZED_PLAYLIST_PREFIXES)


class MediaLocatorService:
    """Resolves free text, direct URLs and collection URLs into media items.

    Recognized inputs, in priority order:

    1. secondary-catalog playlist or album URL
    2. secondary-catalog track URL
    3. primary-catalog video URL (or any other URL yt-dlp understands)
    4. primary-catalog playlist URL
    5. free text
    """

    def __init__(
        self,
        *,
        primary: PrimaryCatalog,
        resolver: CatalogResolver,
        secondary: SecondaryCatalog | None = None,
        settings: CollectionSettings | None = None,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self._resolver = resolver
        self._settings = settings or CollectionSettings()

    @property
    def secondary_enabled(self) -> bool:
        return self._secondary is not None and self._secondary.is_configured

    async def resolve(
        self,
        query: str,
        *,
        requester_id: int | None = None,
        requester_name: str | None = None,
    ) -> MediaItem | Collection:
        """Resolve ``query`` into a single item or a collection.

        Raises:
            NotFoundError: nothing playable matches the query.
            UnsupportedInputError: the query can never be played.
        """
        query = query.strip()
        if not query:
            raise NotFoundError(ErrorMessages.EMPTY_QUERY, query=query)

        reference = self._secondary.parse_reference(query) if self._secondary else None
        if reference is not None:
            if not self.secondary_enabled:
                raise UnsupportedInputError(ErrorMessages.SECONDARY_NOT_CONFIGURED, query=query)
            if reference.is_collection:
                collection = await self._resolve_secondary_collection(query, reference)
                return self._stamp_collection(collection, requester_id, requester_name)
            item = await self._resolve_secondary_track(reference)
            return self._stamp(item, requester_id, requester_name)

        if self._primary.is_url(query) or self._primary.is_video_url(query):
            list_id = self._primary.playlist_id(query)
            if list_id is None:
                entry = await self._primary.get_video(query)
                return self._stamp(entry.to_media_item(), requester_id, requester_name)
            if is_personalized_playlist(list_id):
                raise UnsupportedInputError(ErrorMessages.PERSONALIZED_PLAYLIST, query=query)
            collection = await self._resolve_primary_playlist(query)
            return self._stamp_collection(collection, requester_id, requester_name)

        item = await self._resolve_text(query)
        return self._stamp(item, requester_id, requester_name)

    async def _resolve_secondary_track(self, reference: CatalogReference) -> MediaItem:
        assert self._secondary is not None
        track = await self._secondary.get_track(reference.id)
        item = await self._resolver.resolve_best_match(track)
        if item is None:
            raise NotFoundError(
                ErrorMessages.NO_MATCH_FOR_TRACK.format(track=track.display_name),
                query=reference.id,
            )
        return item

    async def _resolve_secondary_collection(
        self, query: str, reference: CatalogReference
    ) -> Collection:
        assert self._secondary is not None
        if reference.kind is ReferenceKind.PLAYLIST:
            listing = await self._secondary.get_playlist(reference.id, self._settings.max_tracks)
        else:
            listing = await self._secondary.get_album(reference.id, self._settings.max_tracks)

        tracks = [t for t in listing.entries if isinstance(t, TrackMetadata)]
        if not tracks:
            raise NotFoundError(ErrorMessages.EMPTY_COLLECTION.format(title=listing.title), query)

        # Resolve a few members now so playback can start; keep going past
        # the quota only while nothing has matched yet.
        items: list[MediaItem] = []
        consumed = 0
        for track in tracks:
            if consumed >= self._settings.sync_resolve_count and items:
                break
            consumed += 1
            item = await self._resolver.resolve_best_match(track)
            if item is not None:
                items.append(item)

        if not items:
            raise NotFoundError(ErrorMessages.EMPTY_COLLECTION.format(title=listing.title), query)

        deferred = tuple(tracks[consumed:])
        logger.info(
            LogTemplates.LOCATOR_COLLECTION_LOADED,
            reference.kind.value,
            listing.title,
            len(items),
            len(deferred),
        )
        return Collection(
            title=listing.title,
            url=query,
            origin=CatalogOrigin.SECONDARY,
            items=tuple(items),
            deferred=deferred,
            total_tracks=len(tracks),
        )

    async def _resolve_primary_playlist(self, url: str) -> Collection:
        listing = await self._primary.get_playlist(url, self._settings.max_tracks)
        items = tuple(
            entry.to_media_item() for entry in listing.entries if isinstance(entry, CatalogEntry)
        )
        if not items:
            raise NotFoundError(ErrorMessages.EMPTY_COLLECTION.format(title=listing.title), url)

        logger.info(LogTemplates.LOCATOR_COLLECTION_LOADED, "playlist", listing.title, len(items), 0)
        return Collection(title=listing.title, url=url, items=items, total_tracks=len(items))

    async def _resolve_text(self, query: str) -> MediaItem:
        if self.secondary_enabled:
            assert self._secondary is not None
            try:
                tracks = await self._secondary.search_tracks(query, 1)
                if tracks:
                    item = await self._resolver.resolve_best_match(tracks[0])
                    if item is not None:
                        return item
            except DomainError as e:
                logger.warning(LogTemplates.LOCATOR_SECONDARY_SEARCH_FAILED, query, e)

        results = await self._primary.search(query, 1)
        if not results:
            raise NotFoundError(ErrorMessages.NOTHING_FOUND.format(query=query), query=query)

        top = results[0]
        try:
            top = await self._primary.get_video(top.url)
        except DomainError as e:
            logger.debug(LogTemplates.LOCATOR_FULL_INFO_FAILED, top.url, e)
        return top.to_media_item()

    @staticmethod
    def _stamp(item: MediaItem, user_id: int | None, user_name: str | None) -> MediaItem:
        if user_id is None or not user_name:
            return item
        return item.with_requester(user_id, user_name)

    def _stamp_collection(
        self, collection: Collection, user_id: int | None, user_name: str | None
    ) -> Collection:
        items = tuple(self._stamp(item, user_id, user_name) for item in collection.items)
        return collection.model_copy(update={"items": items})
