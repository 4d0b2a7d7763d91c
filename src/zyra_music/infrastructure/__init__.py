"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, voice transport, notifier)
- Audio (yt-dlp, FFmpeg)
- Spotify (Web API over httpx)
"""
