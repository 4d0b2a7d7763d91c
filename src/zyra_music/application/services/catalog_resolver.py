"""Cross-catalog best-match resolution.

Translates a metadata-only track reference into a playable primary-catalog
item by issuing increasingly generic searches and scoring every result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ...config.settings import MatchingSettings
from ...domain.matching.queries import build_search_queries
from ...domain.matching.scoring import select_best_match
from ...domain.music.value_objects import CatalogOrigin
from ...domain.shared.exceptions import DomainError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.music.entities import MediaItem, TrackMetadata
    from ..interfaces.catalog import PrimaryCatalog

logger = logging.getLogger(__name__)


class CatalogResolver:
    """Finds the best primary-catalog match for a secondary-catalog track."""

    def __init__(self, catalog: PrimaryCatalog, settings: MatchingSettings | None = None) -> None:
        self._catalog = catalog
        self._settings = settings or MatchingSettings()

    def _limit_for(self, query_index: int) -> int:
        if query_index < self._settings.specific_query_count:
            return self._settings.specific_query_limit
        return self._settings.fallback_query_limit

    async def resolve_best_match(self, target: TrackMetadata) -> MediaItem | None:
        """Return the first acceptable match, or None when every query comes up short.

        A failing or empty search never aborts resolution; the next query is tried.
        """
        queries = build_search_queries(target.title, target.artists)
        target_duration = target.duration_seconds or None

        for index, query in enumerate(queries):
            if index and self._settings.inter_query_delay_seconds:
                await asyncio.sleep(self._settings.inter_query_delay_seconds)

            try:
                async with asyncio.timeout(self._settings.query_timeout_seconds):
                    candidates = await self._catalog.search(query, self._limit_for(index))
            except TimeoutError:
                logger.debug(LogTemplates.RESOLVER_QUERY_TIMEOUT, query)
                continue
            except DomainError as e:
                logger.debug(LogTemplates.RESOLVER_QUERY_FAILED, query, e)
                continue

            if not candidates:
                continue

            best = select_best_match(
                candidates,
                target.title,
                target.artist_names,
                target_duration,
                threshold=self._settings.acceptance_threshold,
            )
            if best is None:
                continue

            entry, match = best
            logger.info(
                LogTemplates.RESOLVER_MATCHED, target.display_name, entry.title, match.total, query
            )
            return entry.to_media_item(
                origin=CatalogOrigin.SECONDARY,
                cross_catalog_ref=target.id,
                fallback_title=target.title,
            )

        logger.info(LogTemplates.RESOLVER_NO_MATCH, target.display_name, len(queries))
        return None
