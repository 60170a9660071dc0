"""Bridge configuration.

Values come from keyword arguments or, via SignerConfig.from_env(), from
NCA_SIGNER_* environment variables.
"""

from __future__ import annotations

import os
import ssl
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_WS_URL = "wss://127.0.0.1:13579/"
DEFAULT_CMS_FILENAME = "signed_file.cms"
CMS_MIME_TYPE = "application/pkcs7-mime"

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


@dataclass
class SignerConfig:
    """Configuration for the transport session and signing pipeline."""

    # Endpoint
    url: str = DEFAULT_WS_URL

    # NCALayer serves a self-signed certificate on the loopback port
    verify_tls: bool = True

    # websockets handshake and keepalive
    open_timeout: float | None = 10.0
    ping_interval: float | None = 20.0
    ping_timeout: float | None = 20.0

    # None waits for the reply forever
    call_timeout: float | None = None

    # Where DirectorySaver writes downloaded artifacts
    output_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_env(cls) -> SignerConfig:
        """Build a config from NCA_SIGNER_* environment variables."""
        config = cls()
        if url := os.getenv("NCA_SIGNER_URL"):
            config.url = url
        if (verify := os.getenv("NCA_SIGNER_VERIFY_TLS")) is not None:
            config.verify_tls = verify.strip().lower() in _TRUE_VALUES
        if (open_timeout := _env_float("NCA_SIGNER_OPEN_TIMEOUT")) is not None:
            config.open_timeout = open_timeout
        if (call_timeout := _env_float("NCA_SIGNER_CALL_TIMEOUT")) is not None:
            config.call_timeout = call_timeout
        if output_dir := os.getenv("NCA_SIGNER_OUTPUT_DIR"):
            config.output_dir = Path(output_dir)
        return config

    def ssl_context(self, url: str) -> ssl.SSLContext | None:
        """TLS context for url, or None for plain ws:// URLs."""
        if not url.startswith("wss://"):
            return None
        context = ssl.create_default_context()
        if not self.verify_tls:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context
