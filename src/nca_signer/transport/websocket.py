"""WebSocket channel factory backed by the websockets library."""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from ..config import SignerConfig
from .base import Channel

logger = logging.getLogger(__name__)


def websocket_channel_factory(url: str, config: SignerConfig) -> Awaitable[Channel]:
    """Prepare a WebSocket connection to url.

    Raises synchronously when the URL or options are rejected; the returned
    awaitable performs the opening handshake.
    """
    try:
        import websockets
        from websockets.uri import parse_uri
    except ImportError as e:
        raise ImportError(
            "websockets package required. Install with: pip install websockets"
        ) from e

    # Raises InvalidURI for malformed URLs
    parse_uri(url)

    logger.debug(f"Opening WebSocket to {url}")
    return websockets.connect(
        url,
        ssl=config.ssl_context(url),
        open_timeout=config.open_timeout,
        ping_interval=config.ping_interval,
        ping_timeout=config.ping_timeout,
    )
