"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio

import pytest

from nca_signer.config import SignerConfig
from nca_signer.sdk import SignerClient
from nca_signer.transport import MockChannelFactory, create_mock_factory


@pytest.fixture
def mock_factory() -> MockChannelFactory:
    """Mock channel factory answering every command with mock_response."""
    return create_mock_factory()


@pytest.fixture
def config(tmp_path) -> SignerConfig:
    return SignerConfig(url="wss://127.0.0.1:13579/", output_dir=tmp_path)


@pytest.fixture
def client(config: SignerConfig, mock_factory: MockChannelFactory) -> SignerClient:
    return SignerClient(config, channel_factory=mock_factory)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep NCA_SIGNER_* settings from the developer's shell out of tests."""
    for name in (
        "NCA_SIGNER_URL",
        "NCA_SIGNER_VERIFY_TLS",
        "NCA_SIGNER_OPEN_TIMEOUT",
        "NCA_SIGNER_CALL_TIMEOUT",
        "NCA_SIGNER_OUTPUT_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


async def wait_for_pending(client: SignerClient, attempts: int = 100) -> None:
    """Yield to the loop until the client has a call waiting for its reply."""
    for _ in range(attempts):
        if client.has_pending_call:
            return
        await asyncio.sleep(0)
    raise AssertionError("call never became pending")


@pytest.fixture
def pending():
    """The wait_for_pending helper, as a fixture."""
    return wait_for_pending
