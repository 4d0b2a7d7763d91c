"""
Queue Cog Tests

Tests for the queue slash commands and the paginated queue embed.
Commands are invoked through ``command.callback(cog, interaction, ...)`` against
a real session registry wired to fake ports.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import discord
import pytest
import pytest_asyncio

from conftest import GUILD_ID, FakeNotifier, FakeTransport, make_interaction, make_item
from zyra_music.application.services.session_models import QueueInfo
from zyra_music.domain.music.value_objects import RepeatMode
from zyra_music.domain.shared.exceptions import (
    InsufficientItemsError,
    InvalidStateError,
    OutOfRangeError,
)
from zyra_music.domain.shared.messages import DiscordUIMessages
from zyra_music.infrastructure.discord.cogs.queue_cog import (
    QUEUE_PER_PAGE,
    QueueCog,
    build_queue_embed,
    setup,
)


@pytest.fixture
def cog(registry):
    container = MagicMock()
    container.session_registry = registry
    return QueueCog(MagicMock(), container)


@pytest_asyncio.fixture
async def session(registry):
    session = registry.create(GUILD_ID, transport=FakeTransport(), notifier=FakeNotifier())
    session.enqueue_all([make_item("Current"), make_item("One"), make_item("Two"), make_item("Three")])
    await session.play()
    return session


def _sent(interaction) -> str:
    return interaction.response.send_message.call_args[0][0]


# =============================================================================
# Embed
# =============================================================================


class TestBuildQueueEmbed:
    def _info(self, upcoming: int) -> QueueInfo:
        return QueueInfo(
            current_item=make_item("Current", duration=200),
            upcoming_items=[make_item(f"Song {i}", requested_by_name="TestUser") for i in range(1, upcoming + 1)],
            total_duration_seconds=3725,
            repeat_mode=RepeatMode.ALL,
            volume=70,
        )

    def test_first_page(self):
        embed = build_queue_embed(self._info(12), page=1)

        assert embed.title == DiscordUIMessages.EMBED_QUEUE.format(total_tracks=13, page=1, total_pages=2)
        assert embed.fields[0].name == "\U0001f3b5 Now Playing"
        assert "3:20" in embed.fields[0].value
        assert len(embed.fields) == 1 + QUEUE_PER_PAGE
        assert embed.fields[1].name == "1. Song 1"
        assert embed.fields[1].value == "3:00 • Requested by: TestUser"
        assert embed.footer.text == "Total: 1:02:05 · Loop: all · Volume: 70%"

    def test_last_page_numbering(self):
        embed = build_queue_embed(self._info(12), page=2)

        names = [field.name for field in embed.fields[1:]]
        assert names == ["11. Song 11", "12. Song 12"]

    def test_page_clamped(self):
        assert "Page 2/2" in build_queue_embed(self._info(12), page=99).title
        assert "Page 1/2" in build_queue_embed(self._info(12), page=-3).title

    def test_nothing_upcoming(self):
        embed = build_queue_embed(self._info(0), page=1)

        assert "Page 1/1" in embed.title
        assert len(embed.fields) == 1


# =============================================================================
# Commands
# =============================================================================


class TestQueueCommand:
    @pytest.mark.asyncio
    async def test_shows_embed(self, cog, session):
        interaction = make_interaction()

        await cog.queue.callback(cog, interaction, page=1)

        kwargs = interaction.response.send_message.call_args.kwargs
        assert isinstance(kwargs["embed"], discord.Embed)
        assert kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_empty(self, cog):
        interaction = make_interaction()

        await cog.queue.callback(cog, interaction, page=1)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_QUEUE_EMPTY, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_outside_guild(self, cog):
        interaction = make_interaction()
        interaction.guild = None

        await cog.queue.callback(cog, interaction, page=1)

        assert _sent(interaction) == DiscordUIMessages.STATE_SERVER_ONLY


class TestRemoveCommand:
    @pytest.mark.asyncio
    async def test_remove(self, cog, session):
        interaction = make_interaction()

        await cog.remove.callback(cog, interaction, position=2)

        assert _sent(interaction) == DiscordUIMessages.ACTION_TRACK_REMOVED.format(track_title="Two")
        assert [item.title for item in session.upcoming] == ["One", "Three"]

    @pytest.mark.asyncio
    async def test_out_of_range(self, cog, session):
        with pytest.raises(OutOfRangeError):
            await cog.remove.callback(cog, make_interaction(), position=4)

    @pytest.mark.asyncio
    async def test_user_not_in_voice(self, cog, session):
        interaction = make_interaction(channel_id=None)

        await cog.remove.callback(cog, interaction, position=1)

        assert _sent(interaction) == DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE
        assert len(session.upcoming) == 3

    @pytest.mark.asyncio
    async def test_user_in_other_channel(self, cog, session):
        interaction = make_interaction(channel_id=999)

        await cog.remove.callback(cog, interaction, position=1)

        assert _sent(interaction) == DiscordUIMessages.STATE_MUST_BE_IN_VOICE

    @pytest.mark.asyncio
    async def test_no_session(self, cog):
        with pytest.raises(InvalidStateError):
            await cog.remove.callback(cog, make_interaction(bot_channel_id=None), position=1)


class TestMoveCommand:
    @pytest.mark.asyncio
    async def test_move(self, cog, session):
        interaction = make_interaction()

        await cog.move.callback(cog, interaction, from_position=3, to_position=1)

        assert _sent(interaction) == DiscordUIMessages.ACTION_TRACK_MOVED.format(
            track_title="Three", position=1
        )
        assert [item.title for item in session.upcoming] == ["Three", "One", "Two"]


class TestShuffleCommand:
    @pytest.mark.asyncio
    async def test_shuffle_keeps_current(self, cog, session):
        interaction = make_interaction()

        await cog.shuffle.callback(cog, interaction)

        assert _sent(interaction) == DiscordUIMessages.ACTION_SHUFFLED
        assert session.current_item.title == "Current"
        assert sorted(item.title for item in session.upcoming) == ["One", "Three", "Two"]

    @pytest.mark.asyncio
    async def test_too_few_items(self, cog, registry):
        session = registry.create(GUILD_ID, transport=FakeTransport(), notifier=FakeNotifier())
        session.enqueue_all([make_item("A"), make_item("B")])

        with pytest.raises(InsufficientItemsError):
            await cog.shuffle.callback(cog, make_interaction())


class TestClearCommand:
    @pytest.mark.asyncio
    async def test_clear(self, cog, session):
        interaction = make_interaction()

        await cog.clear.callback(cog, interaction)

        assert _sent(interaction) == DiscordUIMessages.ACTION_QUEUE_CLEARED.format(count=3)
        assert session.current_item.title == "Current"
        assert session.upcoming == []

    @pytest.mark.asyncio
    async def test_already_empty(self, cog, session):
        session.clear()
        interaction = make_interaction()

        await cog.clear.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.STATE_QUEUE_ALREADY_EMPTY, ephemeral=True
        )


class TestSetup:
    @pytest.mark.asyncio
    async def test_setup_without_container(self):
        bot = MagicMock(spec=[])

        with pytest.raises(RuntimeError):
            await setup(bot)
