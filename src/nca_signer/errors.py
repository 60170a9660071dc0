"""Error taxonomy for the signer bridge.

Every failure surfaced to callers is an NCASignerError carrying a
human-readable message and an optional machine-readable code:

- Establishment: InitError, ConnectionFailedError
- Call preconditions: NoConnectionError, CallInProgressError
- Service-reported: ServiceError (code taken verbatim from the reply)
- Input pipeline: NoInputLinkedError, InputNotFoundError, NoFileError, FileReadError
- Loss and bounds: ConnectionClosedError, CallTimeoutError
"""

from __future__ import annotations


class NCASignerError(Exception):
    """Base class for all signer bridge errors."""

    code: str | None = None

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r})"


class InitError(NCASignerError):
    """The channel could not be constructed (bad URL, refused options)."""

    code = "INIT_ERROR"

    def __init__(self, message: str = "Failed to initialize WebSocket"):
        super().__init__(message)


class ConnectionFailedError(NCASignerError, ConnectionError):
    """The channel reported an error before becoming ready."""

    code = "CONNECTION_ERROR"

    def __init__(self, message: str = "WebSocket connection failed"):
        super().__init__(message)


class NoConnectionError(NCASignerError, ConnectionError):
    """An operation needed an open connection and there was none."""

    code = "NO_CONNECTION"

    def __init__(self, message: str = "WebSocket connection not established"):
        super().__init__(message)


class ConnectionClosedError(NCASignerError, ConnectionError):
    """The connection ended while a call was waiting for its reply."""

    code = "CONNECTION_CLOSED"

    def __init__(self, message: str = "WebSocket connection closed before reply"):
        super().__init__(message)


class CallInProgressError(NCASignerError):
    """A call was issued while another one is still waiting for its reply."""

    code = "CALL_IN_PROGRESS"

    def __init__(self, message: str = "Another call is already in progress"):
        super().__init__(message)


class CallTimeoutError(NCASignerError, TimeoutError):
    """No reply arrived within the configured call timeout."""

    code = "TIMEOUT"

    def __init__(self, message: str = "Timed out waiting for reply"):
        super().__init__(message)


class ServiceError(NCASignerError):
    """The signing service answered with a non-200 code."""

    def __init__(self, message: str = "Operation failed", code: str | None = None):
        super().__init__(message, code)


class NoInputLinkedError(NCASignerError):
    code = "NO_INPUT_LINKED"

    def __init__(self, message: str = "File input not linked"):
        super().__init__(message)


class InputNotFoundError(NCASignerError):
    code = "INPUT_NOT_FOUND"

    def __init__(self, input_id: str):
        super().__init__(f'File input with id "{input_id}" not found')
        self.input_id = input_id


class NoFileError(NCASignerError):
    code = "NO_FILE"

    def __init__(self, message: str = "No file selected"):
        super().__init__(message)


class FileReadError(NCASignerError):
    code = "FILE_READ_ERROR"

    def __init__(self, message: str = "File reading failed"):
        super().__init__(message)
