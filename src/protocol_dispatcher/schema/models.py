"""Protocol definition models.

A protocol definition is an ordered list of domains, each declaring its
commands (with parameters) and events. Only the fields the dispatcher
interprets are typed; any other schema metadata (``type``, ``description``,
``$ref``, ``experimental``...) is accepted and preserved as extra fields.

Example:
    {
        "domains": [
            {
                "domain": "Page",
                "commands": [
                    {
                        "name": "navigate",
                        "parameters": [
                            {"name": "url", "type": "string"},
                            {"name": "referrer", "type": "string", "optional": true}
                        ]
                    }
                ],
                "events": [{"name": "loaded"}]
            }
        ]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SchemaModel(BaseModel):
    """Base model for protocol definition entries."""

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
    )


class Parameter(SchemaModel):
    """A declared command parameter."""

    name: str
    # Kept as declared; only a literal true makes the parameter optional
    optional: Any = False


class CommandDefinition(SchemaModel):
    """A request type within a domain."""

    name: str
    parameters: list[Parameter] | None = None


class EventDefinition(SchemaModel):
    """A notification type within a domain."""

    name: str


class DomainDefinition(SchemaModel):
    """A named group of commands and events.

    The wire key for the name is ``domain``; ``name`` is accepted too.
    """

    name: str = Field(alias="domain")
    commands: list[CommandDefinition] = Field(default_factory=list)
    events: list[EventDefinition] | None = None


class ProtocolDefinition(SchemaModel):
    """The full protocol schema, read once by the dispatcher."""

    domains: list[DomainDefinition] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProtocolDefinition:
        """Build a definition from an already-decoded JSON document."""
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, path: str | Path) -> ProtocolDefinition:
        """Load a definition from a JSON file."""
        text = Path(path).read_text(encoding="utf-8")
        return cls.from_dict(json.loads(text))
