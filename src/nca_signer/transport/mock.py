"""In-memory channel for tests and offline use.

Usage:
    factory = create_mock_factory()
    factory.set_response("getActiveTokens", {"code": "200", "responseObject": ["PKCS12"]})

    session = TransportSession(channel_factory=factory)
    await session.connect()
    ...
    assert json.loads(factory.channel.sent[0])["method"] == "getActiveTokens"
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

from ..config import SignerConfig

DEFAULT_MOCK_REPLY: dict[str, Any] = {"code": "200", "responseObject": "mock_response"}

_CLOSED = object()


class MockChannel:
    """A channel that answers every sent command from canned replies.

    Replies are looked up by the command's method name. A reply of None
    means the service stays silent for that command.
    """

    def __init__(
        self,
        url: str,
        responses: dict[str, Any] | None = None,
        default_reply: dict[str, Any] | None = DEFAULT_MOCK_REPLY,
    ):
        self.url = url
        self.sent: list[str] = []
        self.closed = False
        self._responses = responses if responses is not None else {}
        self._default_reply = default_reply
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionError("Mock channel closed")
        self.sent.append(message)

        method = json.loads(message).get("method")
        reply = self._responses.get(method, self._default_reply)
        if reply is not None:
            self.inject(reply)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(_CLOSED)

    def inject(self, frame: str | bytes | dict[str, Any]) -> None:
        """Queue an inbound frame as if the service had sent it."""
        if isinstance(frame, dict):
            frame = json.dumps(frame)
        self._inbox.put_nowait(frame)

    def drop(self, error: Exception | None = None) -> None:
        """Simulate the peer ending the connection, abnormally if error is given."""
        self.closed = True
        self._inbox.put_nowait(error if error is not None else _CLOSED)

    async def __aiter__(self) -> AsyncIterator[str | bytes]:
        while True:
            item = await self._inbox.get()
            if item is _CLOSED:
                return
            if isinstance(item, Exception):
                raise item
            yield item


class MockChannelFactory:
    """Channel factory producing MockChannel instances.

    Attributes:
        init_error: Raised synchronously on the next construction
        open_error: Raised while the next channel is opening
    """

    def __init__(self, default_reply: dict[str, Any] | None = DEFAULT_MOCK_REPLY) -> None:
        self.channels: list[MockChannel] = []
        self.init_error: Exception | None = None
        self.open_error: Exception | None = None
        self._default_reply = default_reply
        self._responses: dict[str, Any] = {}

    @property
    def channel(self) -> MockChannel:
        """The most recently created channel."""
        if not self.channels:
            raise LookupError("No mock channel created yet")
        return self.channels[-1]

    def set_response(self, method: str, reply: dict[str, Any] | None) -> None:
        """Set the canned reply for a method (None keeps the service silent)."""
        self._responses[method] = reply

    def __call__(self, url: str, config: SignerConfig) -> Any:
        if self.init_error is not None:
            raise self.init_error
        channel = MockChannel(url, self._responses, self._default_reply)
        self.channels.append(channel)
        return self._open(channel)

    async def _open(self, channel: MockChannel) -> MockChannel:
        await asyncio.sleep(0)
        if self.open_error is not None:
            raise self.open_error
        return channel


def create_mock_factory(
    default_reply: dict[str, Any] | None = DEFAULT_MOCK_REPLY,
) -> MockChannelFactory:
    """Create a mock channel factory for testing."""
    return MockChannelFactory(default_reply)
