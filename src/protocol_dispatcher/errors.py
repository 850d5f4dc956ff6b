"""Exception hierarchy for the dispatcher.

Schema errors are raised by ``Dispatcher.send`` before anything touches the
connection. Remote errors carry the peer's error object unmodified.
"""

from __future__ import annotations

from typing import Any


class DispatcherError(Exception):
    """Base class for all dispatcher errors."""


class SchemaError(DispatcherError):
    """A call does not match the protocol definition."""


class UnknownNamespaceError(SchemaError):
    """The domain is not declared by the protocol definition."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"unknown namespace: {domain}")
        self.domain = domain


class UnknownMethodError(SchemaError):
    """The command is not declared under its domain."""

    def __init__(self, domain: str, command: str) -> None:
        super().__init__(f"unknown method: {domain}.{command}")
        self.domain = domain
        self.command = command


class MissingParameterError(SchemaError):
    """One or more required parameters were not supplied."""

    def __init__(self, command: str, missing: list[str]) -> None:
        super().__init__(f"{command} requires '{','.join(missing)}' parameter")
        self.command = command
        self.missing = missing


class RemoteError(DispatcherError):
    """The peer answered a request with an error object."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        data: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data


class RequestTimeoutError(DispatcherError, TimeoutError):
    """No reply arrived within the configured request timeout."""

    def __init__(self, request_id: int, method: str, timeout: float) -> None:
        super().__init__(f"{method} (id={request_id}) timed out after {timeout}s")
        self.request_id = request_id
        self.method = method
        self.timeout = timeout


class DispatcherClosedError(DispatcherError):
    """The dispatcher was closed before the request completed."""
