"""Reply definitions for the signing service protocol.

The service answers every command with exactly one reply:

    {"code": "200", "responseObject": ...}
    {"code": "500", "message": "..."}

Only code "200" means success.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ServiceError

SUCCESS_CODE = "200"
DEFAULT_FAILURE_MESSAGE = "Operation failed"


class Reply(BaseModel):
    """A reply from the signing service."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    code: str
    message: str | None = None
    response_object: Any = Field(default=None, alias="responseObject")

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_text(cls, value: Any) -> Any:
        # Some service builds send the status as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    def to_error(self) -> ServiceError:
        """Classify a failed reply."""
        return ServiceError(self.message or DEFAULT_FAILURE_MESSAGE, self.code)

    def unwrap(self) -> Any:
        """Return the response object, or raise the classified failure."""
        if self.is_success:
            return self.response_object
        raise self.to_error()
