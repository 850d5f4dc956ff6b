"""Schema-driven command/event dispatcher.

Correlates requests with replies over an unordered message connection,
validates command parameters against a protocol definition and fans
events out to listeners registered per domain.
"""

from .connection import Connection, MemoryConnection
from .dispatcher import Dispatcher, DispatcherConfig
from .errors import (
    DispatcherClosedError,
    DispatcherError,
    MissingParameterError,
    RemoteError,
    RequestTimeoutError,
    SchemaError,
    UnknownMethodError,
    UnknownNamespaceError,
)
from .schema import (
    CommandDefinition,
    DomainDefinition,
    EventDefinition,
    Parameter,
    ProtocolDefinition,
    SchemaIndex,
)

__all__ = [
    # Dispatcher
    "Dispatcher",
    "DispatcherConfig",
    # Connection
    "Connection",
    "MemoryConnection",
    # Schema
    "ProtocolDefinition",
    "DomainDefinition",
    "CommandDefinition",
    "EventDefinition",
    "Parameter",
    "SchemaIndex",
    # Errors
    "DispatcherError",
    "SchemaError",
    "UnknownNamespaceError",
    "UnknownMethodError",
    "MissingParameterError",
    "RemoteError",
    "RequestTimeoutError",
    "DispatcherClosedError",
]
