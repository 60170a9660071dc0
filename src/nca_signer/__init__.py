"""Async bridge to the NCALayer local signing service."""

from .config import DEFAULT_WS_URL, SignerConfig
from .errors import (
    CallInProgressError,
    CallTimeoutError,
    ConnectionClosedError,
    ConnectionFailedError,
    FileReadError,
    InitError,
    InputNotFoundError,
    NCASignerError,
    NoConnectionError,
    NoFileError,
    NoInputLinkedError,
    ServiceError,
)
from .protocol import Command, Reply
from .sdk import SignerClient, SigningPipeline
from .transport import TransportSession, TransportState

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_WS_URL",
    "SignerConfig",
    "Command",
    "Reply",
    "SignerClient",
    "SigningPipeline",
    "TransportSession",
    "TransportState",
    # Errors
    "NCASignerError",
    "InitError",
    "ConnectionFailedError",
    "NoConnectionError",
    "ConnectionClosedError",
    "CallInProgressError",
    "CallTimeoutError",
    "ServiceError",
    "NoInputLinkedError",
    "InputNotFoundError",
    "NoFileError",
    "FileReadError",
]
