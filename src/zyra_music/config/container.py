"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for catalogs, the session registry and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import discord
    from discord.ext.commands import Bot

    from ..application.commands.play_media import PlayHandler
    from ..application.interfaces.catalog import PrimaryCatalog, SecondaryCatalog
    from ..application.interfaces.notifier import SessionNotifier
    from ..application.interfaces.streaming import StreamPipeline
    from ..application.interfaces.voice_transport import VoiceConnector
    from ..application.services.catalog_resolver import CatalogResolver
    from ..application.services.collection_fill import CollectionFillManager
    from ..application.services.media_locator import MediaLocatorService
    from ..application.services.session_registry import SessionRegistry
    from ..infrastructure.audio.ytdlp_catalog import YtDlpCatalog
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _primary_catalog: YtDlpCatalog | None = None
    _secondary_catalog: SecondaryCatalog | None = None
    _stream_pipeline: StreamPipeline | None = None
    _voice_connector: VoiceConnector | None = None

    # Application services
    _catalog_resolver: CatalogResolver | None = None
    _media_locator: MediaLocatorService | None = None
    _session_registry: SessionRegistry | None = None
    _fill_manager: CollectionFillManager | None = None

    # Command handlers
    _play_handler: PlayHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def primary_catalog(self) -> PrimaryCatalog:
        return self._ytdlp_catalog

    @property
    def _ytdlp_catalog(self) -> YtDlpCatalog:
        if self._primary_catalog is None:
            from ..infrastructure.audio.ytdlp_catalog import YtDlpCatalog

            self._primary_catalog = YtDlpCatalog(self.settings.audio)
        return self._primary_catalog

    @property
    def secondary_catalog(self) -> SecondaryCatalog:
        """Get the Spotify catalog (unconfigured until both credentials are set)."""
        if self._secondary_catalog is None:
            from ..infrastructure.spotify.client import SpotifyCatalog

            self._secondary_catalog = SpotifyCatalog(
                self.settings.spotify, self.settings.collections
            )
        return self._secondary_catalog

    @property
    def stream_pipeline(self) -> StreamPipeline:
        if self._stream_pipeline is None:
            from ..infrastructure.audio.ffmpeg_pipeline import FFmpegStreamPipeline

            self._stream_pipeline = FFmpegStreamPipeline(self._ytdlp_catalog, self.settings.audio)
        return self._stream_pipeline

    @property
    def voice_connector(self) -> VoiceConnector:
        if self._voice_connector is None:
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceConnector

            self._voice_connector = DiscordVoiceConnector(self.bot, self.settings.voice)
        return self._voice_connector

    # === Application Services ===

    @property
    def catalog_resolver(self) -> CatalogResolver:
        if self._catalog_resolver is None:
            from ..application.services.catalog_resolver import CatalogResolver

            self._catalog_resolver = CatalogResolver(self.primary_catalog, self.settings.matching)
        return self._catalog_resolver

    @property
    def media_locator(self) -> MediaLocatorService:
        if self._media_locator is None:
            from ..application.services.media_locator import MediaLocatorService

            self._media_locator = MediaLocatorService(
                primary=self.primary_catalog,
                secondary=self.secondary_catalog,
                resolver=self.catalog_resolver,
                settings=self.settings.collections,
            )
        return self._media_locator

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import SessionRegistry

            self._session_registry = SessionRegistry(
                self.stream_pipeline,
                audio_settings=self.settings.audio,
                voice_settings=self.settings.voice,
            )
        return self._session_registry

    @property
    def fill_manager(self) -> CollectionFillManager:
        if self._fill_manager is None:
            from ..application.services.collection_fill import CollectionFillManager

            self._fill_manager = CollectionFillManager(
                registry=self.session_registry,
                resolver=self.catalog_resolver,
                settings=self.settings.collections,
            )
        return self._fill_manager

    # === Command Handlers ===

    @property
    def play_handler(self) -> PlayHandler:
        if self._play_handler is None:
            from ..application.commands.play_media import PlayHandler

            self._play_handler = PlayHandler(
                locator=self.media_locator,
                registry=self.session_registry,
                connector=self.voice_connector,
                fill_manager=self.fill_manager,
            )
        return self._play_handler

    # === Discord Helpers ===

    def create_notifier(self, channel: discord.abc.Messageable, guild_id: int) -> SessionNotifier:
        """Build a notifier that posts to ``channel`` with the now-playing button panel."""
        from ..infrastructure.discord.services.session_notifier import DiscordSessionNotifier
        from ..infrastructure.discord.views.now_playing_view import NowPlayingView

        return DiscordSessionNotifier(
            channel,
            view_factory=lambda _snapshot: NowPlayingView(guild_id=guild_id, container=self),
        )

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Stop every live session and release network clients."""
        if self._fill_manager is not None:
            await self._fill_manager.shutdown()

        if self._session_registry is not None:
            await self._session_registry.shutdown()

        if self._secondary_catalog is not None:
            try:
                await self._secondary_catalog.close()
            except Exception as exc:
                logger.warning(LogTemplates.CONTAINER_CLOSE_FAILED, "secondary catalog", exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
