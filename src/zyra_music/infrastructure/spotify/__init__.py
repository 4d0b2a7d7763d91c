"""Spotify infrastructure - Web API client for track, playlist and album metadata."""

from zyra_music.infrastructure.spotify.client import SpotifyCatalog, parse_spotify_reference

__all__ = [
    "SpotifyCatalog",
    "parse_spotify_reference",
]
