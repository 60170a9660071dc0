"""Transport session: the lifecycle of one socket connection.

The session knows nothing about requests. It opens a channel, reports
readiness or failure, hands every inbound JSON object to a single sink and
writes outbound text frames.

State machine:

    UNCONNECTED --connect()--> CONNECTING --ready--> OPEN
    OPEN --peer close / close()--> CLOSED
    CONNECTING/OPEN --channel error--> FAILED

A new connect() from any state replaces the current connection. An attempt
still opening when a newer one starts raises ConnectionFailedError.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any

from ..config import SignerConfig
from ..errors import ConnectionFailedError, InitError, NCASignerError, NoConnectionError
from .base import Channel, ChannelFactory, CloseSink, MessageSink, TransportState
from .websocket import websocket_channel_factory

logger = logging.getLogger(__name__)


class TransportSession:
    """One logical connection to the signing service."""

    def __init__(
        self,
        config: SignerConfig | None = None,
        channel_factory: ChannelFactory | None = None,
    ):
        self.config = config or SignerConfig()
        self._channel_factory = channel_factory or websocket_channel_factory
        self._state = TransportState.UNCONNECTED
        self._channel: Channel | None = None
        self._reader_task: asyncio.Task[None] | None = None
        self._url: str | None = None
        self._generation = 0

        # Sinks are plain callables invoked from the reader task
        self.on_message: MessageSink | None = None
        self.on_close: CloseSink | None = None

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == TransportState.OPEN and self._channel is not None

    @property
    def url(self) -> str | None:
        """URL of the current (or last attempted) connection."""
        return self._url

    async def connect(self, url: str | None = None) -> None:
        """Open a connection, replacing any existing one.

        Raises:
            InitError: If the channel cannot be constructed
            ConnectionFailedError: If the channel fails before becoming ready,
                or a newer connect() superseded this one
        """
        url = url or self.config.url
        await self._teardown()

        self._generation += 1
        generation = self._generation
        self._state = TransportState.CONNECTING
        self._url = url

        try:
            opening = self._channel_factory(url, self.config)
        except NCASignerError:
            self._state = TransportState.FAILED
            raise
        except Exception as e:
            self._state = TransportState.FAILED
            logger.error(f"Failed to initialize channel for {url}: {e}")
            raise InitError() from e

        try:
            channel = await opening
        except NCASignerError:
            if generation == self._generation:
                self._state = TransportState.FAILED
            raise
        except Exception as e:
            if generation == self._generation:
                self._state = TransportState.FAILED
            logger.error(f"Connection to {url} failed: {e}")
            raise ConnectionFailedError() from e

        if generation != self._generation:
            # A later connect() replaced this attempt while it was opening
            logger.debug(f"Connection to {url} superseded, closing it")
            await self._close_channel(channel)
            raise ConnectionFailedError("Connection attempt superseded")

        self._channel = channel
        self._state = TransportState.OPEN
        self._reader_task = asyncio.create_task(self._read_loop(channel))
        logger.info(f"Connected to {url}")

    async def send(self, raw_text: str) -> None:
        """Write one text frame to the open connection.

        Raises:
            NoConnectionError: If the connection is not open or the write fails
        """
        if not self.is_open or self._channel is None:
            raise NoConnectionError()

        logger.debug(f"-> {raw_text[:200]}")
        try:
            await self._channel.send(raw_text)
        except Exception as e:
            raise NoConnectionError(f"WebSocket send failed: {e}") from e

    async def close(self) -> None:
        """Close the connection."""
        had_channel = self._channel is not None
        await self._teardown()
        if self._state != TransportState.UNCONNECTED:
            self._state = TransportState.CLOSED
        if had_channel:
            logger.info(f"Disconnected from {self._url}")

    async def _teardown(self) -> None:
        """Stop the reader and close the current channel, if any."""
        channel = self._channel
        reader = self._reader_task
        self._channel = None
        self._reader_task = None

        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader

        if channel is not None:
            await self._close_channel(channel)
            self._notify_close(None)

    async def _close_channel(self, channel: Channel) -> None:
        try:
            await channel.close()
        except Exception as e:
            logger.debug(f"Error while closing channel: {e}")

    async def _read_loop(self, channel: Channel) -> None:
        """Background task delivering inbound frames to the sink."""
        error: Exception | None = None
        try:
            async for frame in channel:
                self._deliver(frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = e
            logger.error(f"WebSocket receive error: {e}")

        if self._channel is not channel:
            return

        self._channel = None
        self._reader_task = None
        self._state = TransportState.FAILED if error else TransportState.CLOSED
        logger.info(f"Connection to {self._url} ended ({self._state.value})")
        self._notify_close(error)
        if error is not None:
            await self._close_channel(channel)

    def _deliver(self, frame: str | bytes) -> None:
        if isinstance(frame, bytes):
            try:
                frame = frame.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"Dropping non UTF-8 frame: {e}")
                return

        logger.debug(f"<- {frame[:200]}")
        try:
            data: Any = json.loads(frame)
        except json.JSONDecodeError as e:
            logger.warning(f"Dropping invalid JSON frame: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Dropping frame that is not a JSON object: {type(data).__name__}")
            return

        sink = self.on_message
        if sink is None:
            logger.debug("No message sink registered, dropping frame")
            return
        sink(data)

    def _notify_close(self, error: BaseException | None) -> None:
        if self.on_close is not None:
            self.on_close(error)

    async def __aenter__(self) -> TransportSession:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
