"""Transport layer.

Owns the socket connection lifecycle. Channels are produced by a factory so
the WebSocket implementation can be swapped for the in-memory mock.
"""

from .base import Channel, ChannelFactory, TransportState
from .mock import MockChannel, MockChannelFactory, create_mock_factory
from .session import TransportSession
from .websocket import websocket_channel_factory

__all__ = [
    "Channel",
    "ChannelFactory",
    "TransportState",
    "TransportSession",
    "websocket_channel_factory",
    "MockChannel",
    "MockChannelFactory",
    "create_mock_factory",
]
