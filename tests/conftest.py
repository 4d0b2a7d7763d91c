from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import pytest_asyncio

from zyra_music.application.interfaces.notifier import SessionNotifier
from zyra_music.application.interfaces.streaming import AudioStream, StreamPipeline
from zyra_music.application.interfaces.voice_transport import VoiceTransport
from zyra_music.domain.shared.exceptions import UpstreamFailureError

GUILD_ID = 987654321
VOICE_CHANNEL_ID = 333


# ============================================================================
# Fakes for the session ports
# ============================================================================


class FakeStream(AudioStream):
    def __init__(self, title: str) -> None:
        self.title = title
        self.volumes: list[int] = []
        self.cleaned = False

    def set_volume(self, volume: int) -> None:
        self.volumes.append(volume)

    def cleanup(self) -> None:
        self.cleaned = True


class FakePipeline(StreamPipeline):
    """Opens a FakeStream per item; titles in ``failing`` raise instead."""

    def __init__(self) -> None:
        self.opened: list[str] = []
        self.streams: list[FakeStream] = []
        self.failing: set[str] = set()

    async def open_stream(self, item, *, volume):
        self.opened.append(item.title)
        if item.title in self.failing:
            raise UpstreamFailureError("ffmpeg", f"cannot open {item.title}")
        stream = FakeStream(item.title)
        self.streams.append(stream)
        return stream


class FakeTransport(VoiceTransport):
    """Records calls; ``finish`` plays the role of the audio thread ending an item."""

    def __init__(self) -> None:
        self.attached: list[tuple[AudioStream, object]] = []
        self.stop_calls = 0
        self.pause_calls = 0
        self.resume_calls = 0
        self.connected = True
        self.destroyed = 0

    def attach(self, stream, on_end) -> None:
        self.attached.append((stream, on_end))

    def stop(self) -> None:
        self.stop_calls += 1

    def pause(self) -> None:
        self.pause_calls += 1

    def resume(self) -> None:
        self.resume_calls += 1

    def is_connected(self) -> bool:
        return self.connected

    async def destroy(self) -> None:
        self.destroyed += 1
        self.connected = False

    async def finish(self, error: Exception | None = None, *, index: int = -1) -> None:
        _, on_end = self.attached[index]
        await on_end(error)


class FakeNotifier(SessionNotifier):
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.shown: list[object] = []
        self.refreshed: list[object] = []
        self.deleted: list[object] = []

    async def send(self, content: str) -> None:
        self.sent.append(content)

    async def show_now_playing(self, snapshot):
        self.shown.append(snapshot)
        return f"handle-{len(self.shown)}"

    async def refresh_now_playing(self, handle, snapshot) -> None:
        self.refreshed.append((handle, snapshot))

    async def delete_now_playing(self, handle) -> None:
        self.deleted.append(handle)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


def make_item(title: str = "Test Track", duration: int = 180, **kwargs):
    from zyra_music.domain.music.entities import MediaItem

    slug = title.lower().replace(" ", "-")
    kwargs.setdefault("source_url", f"https://www.youtube.com/watch?v={slug}")
    return MediaItem(title=title, duration_seconds=duration, **kwargs)


def make_entry(title: str, duration: float | None = 200.0, uploader: str = "", url: str | None = None):
    from zyra_music.domain.music.entities import CatalogEntry

    slug = title.lower().replace(" ", "-") or "untitled"
    return CatalogEntry(
        url=url or f"https://www.youtube.com/watch?v={slug}",
        title=title,
        duration=duration,
        uploader=uploader,
    )


def make_track(
    title: str = "Blinding Lights",
    artists: tuple[str, ...] = ("The Weeknd",),
    duration_ms: int = 200_000,
    track_id: str = "sp-track-1",
):
    from zyra_music.domain.music.entities import TrackMetadata

    return TrackMetadata(id=track_id, title=title, artists=artists, duration_ms=duration_ms)


@pytest.fixture
def sample_item():
    return make_item("Test Track", requested_by_id=222, requested_by_name="TestUser")


@pytest.fixture
def sample_track():
    return make_track()


# ============================================================================
# Session Fixtures
# ============================================================================


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def pipeline():
    return FakePipeline()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest_asyncio.fixture
async def session(transport, pipeline, notifier):
    """A session queue wired to fakes; stopped on teardown so no refresh task leaks."""
    from zyra_music.application.services.session_queue import SessionQueue

    queue = SessionQueue(
        GUILD_ID,
        transport=transport,
        pipeline=pipeline,
        notifier=notifier,
        progress_refresh_seconds=3600,
        reconnect_window_seconds=0.6,
    )
    yield queue
    await queue.stop()


@pytest_asyncio.fixture
async def registry(pipeline):
    from zyra_music.application.services.session_registry import SessionRegistry
    from zyra_music.config.settings import AudioSettings, VoiceSettings

    reg = SessionRegistry(
        pipeline,
        audio_settings=AudioSettings(progress_refresh_seconds=3600),
        voice_settings=VoiceSettings(reconnect_window_seconds=0.3),
    )
    yield reg
    await reg.shutdown()


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def fast_matching():
    """Matching settings without the pause between searches."""
    from zyra_music.config.settings import MatchingSettings

    return MatchingSettings(inter_query_delay_seconds=0.0, query_timeout_seconds=1.0)


@pytest.fixture
def fast_collections():
    from zyra_music.config.settings import CollectionSettings

    return CollectionSettings(page_delay_seconds=0.0, fill_delay_seconds=0.0)


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    from zyra_music.config.settings import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Discord Interaction Fixtures
# ============================================================================


def make_interaction(
    user_id: int = 222,
    *,
    guild_id: int = GUILD_ID,
    channel_id: int | None = VOICE_CHANNEL_ID,
    bot_channel_id: int | None = VOICE_CHANNEL_ID,
):
    """Slash-command interaction from a guild member.

    ``channel_id=None`` means the user is not in voice; ``bot_channel_id=None``
    means the bot is not connected anywhere in the guild.
    """
    interaction = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)

    member = MagicMock(spec=discord.Member)
    member.id = user_id
    member.display_name = "TestUser"
    if channel_id is None:
        member.voice = None
    else:
        member.voice.channel.id = channel_id
    interaction.user = member

    interaction.guild = MagicMock()
    interaction.guild.id = guild_id
    if bot_channel_id is None:
        interaction.guild.voice_client = None
    else:
        interaction.guild.voice_client.channel.id = bot_channel_id
    return interaction
