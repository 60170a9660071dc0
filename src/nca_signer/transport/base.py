"""Channel abstractions shared by the transport session and its channel factories."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..config import SignerConfig


class TransportState(str, Enum):
    """Connection state machine."""

    UNCONNECTED = "unconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    FAILED = "failed"


@runtime_checkable
class Channel(Protocol):
    """A connected full-duplex text channel.

    Iterating the channel yields inbound frames until the peer closes.
    An abnormal end is reported by raising from the iteration.
    """

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


# Must raise synchronously for construction failures (bad URL, bad options);
# the returned awaitable performs the opening handshake.
ChannelFactory = Callable[[str, "SignerConfig"], Awaitable[Channel]]

MessageSink = Callable[[dict[str, Any]], None]
CloseSink = Callable[[BaseException | None], None]
