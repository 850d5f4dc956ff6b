"""Protocol definition models and the lookup index derived from them."""

from .index import SchemaIndex
from .models import (
    CommandDefinition,
    DomainDefinition,
    EventDefinition,
    Parameter,
    ProtocolDefinition,
)

__all__ = [
    "SchemaIndex",
    "ProtocolDefinition",
    "DomainDefinition",
    "CommandDefinition",
    "EventDefinition",
    "Parameter",
]
