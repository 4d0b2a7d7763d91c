"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from zyra_music.application.interfaces.catalog import (
    CatalogListing,
    CatalogReference,
    PrimaryCatalog,
    ReferenceKind,
    SecondaryCatalog,
)
from zyra_music.application.interfaces.notifier import SessionNotifier
from zyra_music.application.interfaces.streaming import AudioStream, StreamPipeline
from zyra_music.application.interfaces.voice_transport import VoiceConnector, VoiceTransport

__all__ = [
    "PrimaryCatalog",
    "SecondaryCatalog",
    "CatalogListing",
    "CatalogReference",
    "ReferenceKind",
    "AudioStream",
    "StreamPipeline",
    "VoiceTransport",
    "VoiceConnector",
    "SessionNotifier",
]
