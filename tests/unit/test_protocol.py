"""Unit tests for the wire protocol models."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from nca_signer.errors import ServiceError
from nca_signer.protocol import COMMON_UTILS_MODULE, Command, CommonUtilsMethod, Reply

# =============================================================================
# Command Tests
# =============================================================================


class TestCommand:
    """Tests for Command serialization."""

    def test_get_active_tokens_wire_shape(self) -> None:
        """getActiveTokens is sent without args."""
        data = json.loads(Command.get_active_tokens().to_json())

        assert data == {"module": "kz.gov.pki.knca.commonUtils", "method": "getActiveTokens"}
        assert "args" not in data

    def test_create_cades_wire_shape(self) -> None:
        """createCAdESFromBase64 carries storage, key type, data and attached flag."""
        data = json.loads(Command.create_cades_from_base64("aGVsbG8=").to_json())

        assert data["module"] == COMMON_UTILS_MODULE
        assert data["method"] == "createCAdESFromBase64"
        assert data["args"] == ["PKCS12", "SIGNATURE", "aGVsbG8=", True]

    def test_create_cades_overrides(self) -> None:
        """Storage, key type and attached can be overridden."""
        command = Command.create_cades_from_base64(
            "aGVsbG8=", storage="AKKaztokenStore", key_type="AUTHENTICATION", attached=False
        )

        assert command.to_wire()["args"] == ["AKKaztokenStore", "AUTHENTICATION", "aGVsbG8=", False]

    def test_empty_args_sent_as_empty_list(self) -> None:
        """An empty args tuple stays on the wire."""
        command = Command.create("some.module", "noArgs", [])

        assert command.to_wire() == {"module": "some.module", "method": "noArgs", "args": []}

    def test_create_accepts_enum_method(self) -> None:
        """Methods may be given as enum members."""
        command = Command.create(COMMON_UTILS_MODULE, CommonUtilsMethod.GET_ACTIVE_TOKENS)

        assert command.method == "getActiveTokens"

    def test_command_is_immutable(self) -> None:
        """Commands cannot be modified."""
        command = Command.get_active_tokens()

        with pytest.raises(ValidationError):
            command.method = "other"  # type: ignore[misc]

    def test_unicode_args_preserved(self) -> None:
        """Non-ASCII args are sent unescaped."""
        command = Command.create("m", "x", ["Қазақстан"])

        assert "Қазақстан" in command.to_json()
        assert json.loads(command.to_json())["args"] == ["Қазақстан"]


# =============================================================================
# Reply Tests
# =============================================================================


class TestReply:
    """Tests for Reply parsing and classification."""

    def test_success_reply(self) -> None:
        """Code 200 is success."""
        reply = Reply.model_validate({"code": "200", "responseObject": ["PKCS12"]})

        assert reply.is_success
        assert reply.unwrap() == ["PKCS12"]

    def test_success_without_response_object(self) -> None:
        """A success may omit responseObject."""
        reply = Reply.model_validate({"code": "200"})

        assert reply.unwrap() is None

    def test_failure_reply_classified(self) -> None:
        """A failure reply becomes a ServiceError."""
        reply = Reply.model_validate({"code": "500", "message": "bad token"})

        assert not reply.is_success
        with pytest.raises(ServiceError) as exc_info:
            reply.unwrap()
        assert exc_info.value.code == "500"
        assert exc_info.value.message == "bad token"

    def test_failure_message_defaults(self) -> None:
        """A failure without a message uses the default text."""
        error = Reply.model_validate({"code": "500"}).to_error()

        assert error.message == "Operation failed"
        assert error.code == "500"

    def test_numeric_code_coerced(self) -> None:
        """An integer code is compared as a string."""
        reply = Reply.model_validate({"code": 200, "responseObject": "x"})

        assert reply.code == "200"
        assert reply.is_success

    def test_missing_code_rejected(self) -> None:
        """A reply without a code does not validate."""
        with pytest.raises(ValidationError):
            Reply.model_validate({"responseObject": "x"})

    def test_extra_fields_kept(self) -> None:
        """Unknown reply fields are kept."""
        reply = Reply.model_validate({"code": "200", "secretKey": "abc"})

        assert reply.model_extra == {"secretKey": "abc"}
