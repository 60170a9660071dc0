"""Signer SDK.

Two layers:
- SignerClient: awaitable one-call-at-a-time client over a TransportSession
- SigningPipeline: file selection -> sign -> CMS download on top of the client
"""

from .client import SignerClient
from .host import (
    ArtifactSaver,
    Blob,
    DirectorySaver,
    FileHost,
    FileSource,
    LocalFileHost,
    MemoryFileHost,
    PathFileSource,
    StaticFileSource,
    read_file_base64,
)
from .pipeline import SigningPipeline

__all__ = [
    "SignerClient",
    "SigningPipeline",
    # Host capabilities
    "ArtifactSaver",
    "Blob",
    "DirectorySaver",
    "FileHost",
    "FileSource",
    "LocalFileHost",
    "MemoryFileHost",
    "PathFileSource",
    "StaticFileSource",
    "read_file_base64",
]
