"""Command definitions for the signing service protocol.

Commands are requests from the bridge to the service. The wire shape is:

    {
        "module": "kz.gov.pki.knca.commonUtils",
        "method": "createCAdESFromBase64",
        "args": ["PKCS12", "SIGNATURE", "<base64>", true]
    }

There is no command id: the service answers commands strictly one at a time,
so a reply is matched to the only command that is waiting for one.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

COMMON_UTILS_MODULE = "kz.gov.pki.knca.commonUtils"


class CommonUtilsMethod(str, Enum):
    """Known methods of the commonUtils module."""

    GET_ACTIVE_TOKENS = "getActiveTokens"
    CREATE_CADES_FROM_BASE64 = "createCAdESFromBase64"


class Command(BaseModel):
    """An immutable request descriptor.

    `args` is omitted from the wire when it is None; an empty tuple is
    sent as an empty list.
    """

    model_config = ConfigDict(frozen=True)

    module: str
    method: str
    args: tuple[Any, ...] | None = None

    def to_wire(self) -> dict[str, Any]:
        """Build the JSON object sent to the service."""
        data: dict[str, Any] = {"module": self.module, "method": self.method}
        if self.args is not None:
            data["args"] = list(self.args)
        return data

    def to_json(self) -> str:
        """Serialize to the text frame sent over the socket."""
        return json.dumps(self.to_wire(), ensure_ascii=False)

    @classmethod
    def create(
        cls,
        module: str,
        method: str | CommonUtilsMethod,
        args: list[Any] | tuple[Any, ...] | None = None,
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            module=module,
            method=method.value if isinstance(method, CommonUtilsMethod) else method,
            args=tuple(args) if args is not None else None,
        )

    # Convenience factories for the known commands
    @classmethod
    def get_active_tokens(cls) -> Command:
        """Create a getActiveTokens command."""
        return cls.create(COMMON_UTILS_MODULE, CommonUtilsMethod.GET_ACTIVE_TOKENS)

    @classmethod
    def create_cades_from_base64(
        cls,
        base64_data: str,
        storage: str = "PKCS12",
        key_type: str = "SIGNATURE",
        attached: bool = True,
    ) -> Command:
        """Create a createCAdESFromBase64 command.

        Args:
            base64_data: Content to sign, base64 encoded
            storage: Key storage name offered to the user (e.g. "PKCS12", "AKKaztokenStore")
            key_type: "SIGNATURE" or "AUTHENTICATION"
            attached: Whether the signed content is embedded in the CMS
        """
        return cls.create(
            COMMON_UTILS_MODULE,
            CommonUtilsMethod.CREATE_CADES_FROM_BASE64,
            [storage, key_type, base64_data, attached],
        )
