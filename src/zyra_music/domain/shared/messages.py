"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Lookup Errors
    EMPTY_QUERY = "Query cannot be empty"
    NOTHING_FOUND = "Couldn't find anything for: {query}"
    NO_MATCH_FOR_TRACK = "Couldn't find a YouTube match for **{track}**"
    EMPTY_COLLECTION = "None of the tracks in **{title}** could be found"
    PERSONALIZED_PLAYLIST = "Personal mixes and private lists (Mix, Liked, Watch Later) can't be played"
    SECONDARY_NOT_CONFIGURED = "Spotify links need SPOTIFY__CLIENT_ID and SPOTIFY__CLIENT_SECRET"

    # Audio/Stream Errors
    NO_STREAM_URL = "No stream URL found for {url}"

    # Spotify Errors
    SPOTIFY_AUTH_FAILED = "Spotify authentication failed"
    SPOTIFY_NOT_FOUND = "Spotify resource not found"
    SPOTIFY_TRACK_NOT_FOUND = "Spotify track {id} not found"
    SPOTIFY_PLAYLIST_NOT_FOUND = "Spotify playlist {id} not found or private"
    SPOTIFY_ALBUM_NOT_FOUND = "Spotify album {id} not found"

    # Voice Errors
    GUILD_NOT_FOUND = "Guild {id} not found"
    CHANNEL_NOT_VOICE = "Channel {id} is not a voice channel"
    VOICE_NO_PERMISSION = "I don't have permission to join that voice channel"

    # Startup/Wiring Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Cache Operations
    CACHE_HIT_URL = "Cache hit for URL: %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Voice Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup in guild %s: %s"
    VOICE_ITEM_ENDED = "Voice playback ended in guild %s (error: %s)"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Session Queue
    SESSION_PLAYING = "Guild %s now playing '%s'"
    SESSION_STREAM_FAILED = "Guild %s failed to open stream for '%s': %s"
    SESSION_ATTACH_FAILED = "Guild %s voice transport refused stream for '%s': %s"
    SESSION_STALE_STREAM = "Guild %s discarding stream for '%s' opened after a newer request"
    SESSION_STALE_END = "Guild %s ignoring end callback from a replaced stream"
    SESSION_SPURIOUS_END = "Guild %s ignoring end notification while not playing"
    SESSION_PLAYBACK_ERROR = "Guild %s playback error on '%s': %s"
    SESSION_QUEUE_FINISHED = "Guild %s queue finished"
    SESSION_STOPPED = "Guild %s session stopped (%s)"
    SESSION_TRANSPORT_DESTROY_FAILED = "Guild %s failed to release voice transport: %s"
    SESSION_TRANSPORT_LOST = "Guild %s lost its voice connection, waiting %ss for reconnect"
    SESSION_TRANSPORT_RECOVERED = "Guild %s voice connection recovered"
    SESSION_NOTIFY_FAILED = "Guild %s failed to post to text channel: %s"
    SESSION_DISPLAY_FAILED = "Guild %s now-playing display update failed: %s"
    SESSION_DISPLAY_GONE = "Guild %s now-playing message already gone"

    # Session Registry
    REGISTRY_SESSION_CREATED = "Created session for guild %s"
    REGISTRY_SESSION_REMOVED = "Removed session for guild %s"
    REGISTRY_LISTENER_FAILED = "Session removal listener failed for guild %s"
    REGISTRY_SHUTDOWN = "Stopping all sessions"

    # Collection Fill
    FILL_STARTED = "Guild %s background fill started for %d tracks"
    FILL_NO_MATCH = "Guild %s no match for '%s', skipping"
    FILL_INTERRUPTED = "Guild %s background fill cancelled after %d tracks"
    FILL_FINISHED = "Guild %s background fill finished: %d of %d tracks added"
    FILL_CANCELLED = "Guild %s cancelled %d background fill job(s)"

    # Resolution/Search
    RESOLVER_QUERY_TIMEOUT = "Search timed out for %r"
    RESOLVER_QUERY_FAILED = "Search failed for %r: %s"
    RESOLVER_MATCHED = "Matched '%s' -> '%s' (score=%.3f, query=%r)"
    RESOLVER_NO_MATCH = "No acceptable match for '%s' after %d queries"
    LOCATOR_COLLECTION_LOADED = "Loaded %s '%s': %d queued now, %d deferred"
    LOCATOR_SECONDARY_SEARCH_FAILED = "Spotify search failed for %r, falling back: %s"
    LOCATOR_FULL_INFO_FAILED = "Could not fetch full info for %s: %s"
    SEARCH_FAILED = "Search failed for %r: %s"
    PLAY_RESOLVE_FAILED = "Failed to resolve %r: %s"
    PLAY_VOICE_FAILED = "Failed to join voice in guild %s: %s"
    PLAY_JOINED = "Joined voice channel %s in guild %s with an empty queue"
    PLAY_SESSION_LOST = "Guild %s session vanished after a concurrent create"

    # yt-dlp
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s: %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r: %s"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s: %s"

    # FFmpeg
    FFMPEG_DISCORD_CLIENT_ERROR = "Discord client error: %s"
    FFMPEG_STREAM_OPENED = "Opened FFmpeg stream for '%s'"

    # Spotify
    SPOTIFY_TOKEN_REFRESHED = "Spotify token refreshed (expires in %ss)"
    SPOTIFY_TOKEN_FAILED = "Spotify token request failed: %s"
    SPOTIFY_REQUEST_FAILED = "Spotify request to %s failed with HTTP %s"
    SPOTIFY_COLLECTION_FETCHED = "Fetched Spotify %s '%s' (%d tracks)"
    SPOTIFY_DISABLED = "Spotify credentials not set; Spotify links are disabled"

    # Discord Presentation
    NOTIFIER_DELETE_FAILED = "Failed to delete message %s: %s"
    VIEW_BUTTON_ERROR = "Now-playing button failed in guild %s"

    # Events
    EVENT_GATEWAY_CONNECTED = "WebSocket connected"
    EVENT_GATEWAY_DISCONNECTED = "WebSocket disconnected"
    EVENT_GATEWAY_RESUMED = "WebSocket session resumed"
    EVENT_GUILD_JOINED = "Joined guild: %s (%s)"
    EVENT_GUILD_LEFT = "Left guild: %s (%s)"
    EVENT_BOT_VOICE_DROPPED = "Bot dropped out of voice in guild %s (channel %s)"
    EVENT_RECONNECT_FAILED = "Reconnect watcher for guild %s failed: %s"

    # Container
    CONTAINER_CLOSE_FAILED = "Failed to close %s: %s"

    # Application Lifecycle
    BOT_STARTING = "Starting Zyra music bot in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown exceeded %ss"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_VOICE_DISCONNECT_FAILED = "Failed to disconnect leftover voice client: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"

    # Bot Command Sync
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SYNC_ON_STARTUP_FAILED = "Failed to sync commands on startup: %s"

    # Bot Error Handling
    BOT_COMMAND_REJECTED = "Command '%s' rejected (%s): %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Play Results
    NOW_PLAYING_ITEM = "🎵 Now playing: **{title}**"
    QUEUED_ITEM = "✅ Queued at position {position}: **{title}**"
    QUEUED_COLLECTION = "📋 Queued {count} tracks from **{title}** ({pending} more loading in the background)"
    SEARCH_RESULTS = "🔍 {count} results for **{query}**. Pick one to play:"
    SEARCH_SELECTED = "▶️ Selected **{title}**"

    # Error Messages
    ERROR_OCCURRED = "An error occurred: {error}"
    ERROR_DOMAIN = "❌ {error}"
    ERROR_RESOLVING = "❌ Couldn't load that: {error}"
    ERROR_VOICE_CONNECT = "❌ I couldn't join your voice channel."
    ERROR_PLAYING_ITEM = "❌ Error playing **{title}**: {error}"
    ERROR_PLAYBACK = "⚠️ Playback of **{title}** stopped early: {error}"
    DISPLAY_GONE = "Now-playing message no longer exists"

    # Action Messages
    ACTION_STOPPED = "⏹️ Stopped playback and cleared the queue."
    ACTION_PAUSED = "⏸️ Paused playback."
    ACTION_RESUMED = "▶️ Resumed playback."
    ACTION_SKIPPED = "⏭️ Skipped."
    ACTION_SKIPPED_TITLE = "⏭️ Skipped: **{title}**"
    ACTION_SKIPPED_TO = "⏭️ Jumped to: **{title}**"
    ACTION_SHUFFLED = "🔀 Shuffled the queue."
    ACTION_LOOP_MODE_CHANGED = "{emoji} Loop mode: **{mode}**"
    ACTION_VOLUME_SET = "🔊 Volume: **{volume}%**\n{slider}"
    ACTION_TRACK_REMOVED = "🗑️ Removed: **{track_title}**"
    ACTION_TRACK_MOVED = "↕️ Moved **{track_title}** to position {position}"
    ACTION_QUEUE_CLEARED = "🗑️ Cleared {count} tracks from the queue."
    ACTION_JOINED = "✅ Joined **{channel}**! Use `/play` to start the music."

    # State Messages
    STATE_NOTHING_PLAYING = "Nothing is playing."
    STATE_QUEUE_EMPTY = "Queue is empty."
    STATE_QUEUE_ALREADY_EMPTY = "Queue is already empty."
    STATE_QUEUE_FINISHED = "🎵 Queue finished. Add more songs to keep the party going!"
    STATE_MUST_BE_IN_VOICE = "You must be in my voice channel to use this command!"
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel first."
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_VERIFY_VOICE_FAILED = "Could not verify your voice state."
    STATE_ALREADY_IN_VOICE = "I'm already in a voice channel! Use `/play` to add songs."

    # Embeds
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_PAUSED = "⏸️ Paused"
    EMBED_HELP = "🎵 Commands"
    HELP_DESCRIPTION = "Everything I can do. Join a voice channel and start with `/play`."
    EMBED_QUEUE = "📋 Queue ({total_tracks} tracks) · Page {page}/{total_pages}"
    QUEUE_FOOTER = "Total: {duration} · Loop: {mode} · Volume: {volume}%"
    UP_NEXT_MORE = " (+{count} more)"
    UP_NEXT_NONE = "Nothing queued"
