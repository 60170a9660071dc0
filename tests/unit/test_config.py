"""Tests for SignerConfig defaults and environment overrides."""

import ssl
from pathlib import Path

import pytest

from nca_signer.config import DEFAULT_WS_URL, SignerConfig


class TestSignerConfig:
    def test_defaults(self):
        """Defaults point at the local service with TLS verification."""
        config = SignerConfig()

        assert config.url == DEFAULT_WS_URL == "wss://127.0.0.1:13579/"
        assert config.verify_tls is True
        assert config.call_timeout is None

    def test_from_env(self, monkeypatch, tmp_path):
        """Every NCA_SIGNER_* variable is applied."""
        monkeypatch.setenv("NCA_SIGNER_URL", "wss://localhost:1234/")
        monkeypatch.setenv("NCA_SIGNER_VERIFY_TLS", "false")
        monkeypatch.setenv("NCA_SIGNER_OPEN_TIMEOUT", "2.5")
        monkeypatch.setenv("NCA_SIGNER_CALL_TIMEOUT", "30")
        monkeypatch.setenv("NCA_SIGNER_OUTPUT_DIR", str(tmp_path))

        config = SignerConfig.from_env()

        assert config.url == "wss://localhost:1234/"
        assert config.verify_tls is False
        assert config.open_timeout == 2.5
        assert config.call_timeout == 30.0
        assert config.output_dir == Path(tmp_path)

    def test_from_env_without_variables_matches_defaults(self):
        """An empty environment gives the defaults."""
        assert SignerConfig.from_env().url == DEFAULT_WS_URL

    def test_invalid_number_rejected(self, monkeypatch):
        """A non-numeric timeout names the variable."""
        monkeypatch.setenv("NCA_SIGNER_CALL_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="NCA_SIGNER_CALL_TIMEOUT"):
            SignerConfig.from_env()

    def test_no_ssl_for_plain_ws(self):
        """Plain ws URLs get no SSL context."""
        assert SignerConfig().ssl_context("ws://127.0.0.1:8765/") is None

    def test_ssl_verification_enabled(self):
        """Verification is on by default for wss."""
        context = SignerConfig().ssl_context("wss://127.0.0.1:13579/")

        assert context is not None
        assert context.verify_mode == ssl.CERT_REQUIRED

    def test_ssl_verification_disabled(self):
        """verify_tls=False skips certificate checks."""
        context = SignerConfig(verify_tls=False).ssl_context("wss://127.0.0.1:13579/")

        assert context is not None
        assert context.check_hostname is False
        assert context.verify_mode == ssl.CERT_NONE
