"""Call correlator: pairs one outbound command with the next inbound reply.

The signing service carries no request ids, so at most one call may be
outstanding on a connection. A second call issued while one is pending is
rejected with CallInProgressError; callers must await each call before
issuing the next.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from ..config import SignerConfig
from ..errors import (
    CallInProgressError,
    CallTimeoutError,
    ConnectionClosedError,
    NoConnectionError,
    ServiceError,
)
from ..protocol import Command, Reply
from ..transport import ChannelFactory, TransportSession

logger = logging.getLogger(__name__)


class SignerClient:
    """Awaitable request/response client for the local signing service.

    Usage:
        async with SignerClient() as client:
            await client.connect()
            tokens = await client.get_active_tokens()
    """

    def __init__(
        self,
        config: SignerConfig | None = None,
        session: TransportSession | None = None,
        channel_factory: ChannelFactory | None = None,
    ):
        self.config = config or (session.config if session else SignerConfig())
        self._session = session or TransportSession(self.config, channel_factory)
        self._session.on_message = self._on_reply
        self._session.on_close = self._on_close
        self._pending: asyncio.Future[Any] | None = None

    @property
    def session(self) -> TransportSession:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session.is_open

    @property
    def has_pending_call(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def connect(self, url: str | None = None) -> None:
        """Connect to the service (default URL from config)."""
        await self._session.connect(url)

    async def close(self) -> None:
        await self._session.close()

    async def call(self, command: Command) -> Any:
        """Send a command and wait for its reply.

        Returns:
            The reply's responseObject

        Raises:
            NoConnectionError: If the connection is not open (nothing is sent)
            CallInProgressError: If another call is still waiting for its reply
            ServiceError: If the service replies with a non-200 code
            ConnectionClosedError: If the connection ends before the reply
            CallTimeoutError: If config.call_timeout elapses first (the
                connection is closed, since a late reply cannot be told apart)
        """
        if not self._session.is_open:
            raise NoConnectionError()
        if self.has_pending_call:
            raise CallInProgressError()

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending = future
        try:
            await self._session.send(command.to_json())

            timeout = self.config.call_timeout
            if timeout is None:
                return await future
            try:
                return await asyncio.wait_for(future, timeout)
            except TimeoutError:
                if not future.cancelled():
                    raise
                # A late reply would otherwise resolve the next call
                logger.warning(f"No reply to {command.method} within {timeout}s, closing")
                await self._session.close()
                raise CallTimeoutError(
                    f"No reply to {command.method} within {timeout}s"
                ) from None
        finally:
            if self._pending is future:
                self._pending = None

    def _on_reply(self, data: dict[str, Any]) -> None:
        """Resolve the pending call with an inbound message."""
        future = self._pending
        if future is None or future.done():
            logger.debug("Dropping reply with no pending call")
            return
        self._pending = None

        try:
            reply = Reply.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Invalid reply from service: {e}")
            future.set_exception(ServiceError("Invalid reply from service", "INVALID_REPLY"))
            return

        if reply.is_success:
            future.set_result(reply.response_object)
        else:
            future.set_exception(reply.to_error())

    def _on_close(self, error: BaseException | None) -> None:
        future = self._pending
        if future is None or future.done():
            return
        self._pending = None
        future.set_exception(ConnectionClosedError())

    # Convenience commands

    async def get_active_tokens(self) -> Any:
        """List the key storages currently available to the service."""
        return await self.call(Command.get_active_tokens())

    async def create_cades_from_base64(
        self,
        base64_data: str,
        storage: str = "PKCS12",
        key_type: str = "SIGNATURE",
        attached: bool = True,
    ) -> str:
        """Create a CAdES signature (CMS, base64) over base64 encoded content."""
        return await self.call(
            Command.create_cades_from_base64(
                base64_data, storage=storage, key_type=key_type, attached=attached
            )
        )

    async def __aenter__(self) -> SignerClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
