"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.validators import validate_discord_snowflake


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        # JSON arrays from env vars arrive as lists
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: int = Field(default=50, ge=0, le=100)
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio[ext=webm]/bestaudio/best"
    progress_refresh_seconds: float = Field(
        default=15.0,
        ge=1.0,
        validation_alias=AliasChoices("progress_refresh_seconds", "progress_refresh"),
    )


class SpotifySettings(BaseModel):
    """Secondary catalog (Spotify Web API) credentials and timeouts."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_id", "spotify_client_id"),
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    page_timeout_seconds: float = Field(default=15.0, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id.get_secret_value() and self.client_secret.get_secret_value())


class MatchingSettings(BaseModel):
    """Cross-catalog best-match resolution."""

    model_config = SettingsConfigDict(frozen=True)

    acceptance_threshold: float = Field(default=0.35, ge=0.0, le=1.0)
    inter_query_delay_seconds: float = Field(default=0.1, ge=0.0)
    query_timeout_seconds: float = Field(default=10.0, gt=0)
    specific_query_limit: int = Field(default=10, ge=1, le=50)
    fallback_query_limit: int = Field(default=8, ge=1, le=50)
    specific_query_count: int = Field(default=4, ge=0)


class CollectionSettings(BaseModel):
    """Playlist and album import limits."""

    model_config = SettingsConfigDict(frozen=True)

    max_tracks: int = Field(default=500, ge=1, le=1000)
    page_size: int = Field(default=50, ge=1, le=50)
    page_delay_seconds: float = Field(default=0.1, ge=0.0)
    sync_resolve_count: int = Field(default=3, ge=1, le=25)
    fill_delay_seconds: float = Field(default=1.0, ge=0.0)


class VoiceSettings(BaseModel):
    """Voice connection timing."""

    model_config = SettingsConfigDict(frozen=True)

    connect_timeout_seconds: float = Field(default=30.0, gt=0)
    reconnect_window_seconds: float = Field(default=5.0, ge=0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__OWNER_IDS, ... (nested with ``__``)
    - SPOTIFY__CLIENT_ID, SPOTIFY__CLIENT_SECRET
    - MATCHING__ACCEPTANCE_THRESHOLD, COLLECTIONS__MAX_TRACKS, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    collections: CollectionSettings = Field(default_factory=CollectionSettings)
    voice: VoiceSettings = Field(default_factory=VoiceSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
