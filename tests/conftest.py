"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from typing import Any

import pytest

from protocol_dispatcher import Dispatcher, MemoryConnection, ProtocolDefinition

PROTOCOL: dict[str, Any] = {
    "version": {"major": "1", "minor": "3"},
    "domains": [
        {
            "domain": "Page",
            "description": "Actions and events related to the inspected page.",
            "commands": [
                {"name": "enable"},
                {
                    "name": "navigate",
                    "parameters": [
                        {"name": "url", "type": "string"},
                        {"name": "referrer", "type": "string", "optional": True},
                    ],
                },
                {
                    "name": "setViewport",
                    "parameters": [
                        {"name": "width", "type": "integer"},
                        {"name": "height", "type": "integer"},
                        {"name": "scale", "type": "number", "optional": True},
                        {"name": "mobile", "type": "boolean", "optional": False},
                    ],
                },
            ],
            "events": [{"name": "loaded"}, {"name": "frameNavigated"}],
        },
        {
            "domain": "Network",
            "commands": [
                {"name": "enable", "parameters": []},
                {
                    "name": "getResponseBody",
                    "parameters": [{"name": "requestId", "$ref": "RequestId"}],
                },
            ],
        },
        {"domain": "Empty", "commands": []},
    ],
}


@pytest.fixture
def protocol_dict() -> dict[str, Any]:
    """The sample protocol as decoded JSON."""
    return json.loads(json.dumps(PROTOCOL))


@pytest.fixture
def protocol(protocol_dict: dict[str, Any]) -> ProtocolDefinition:
    return ProtocolDefinition.from_dict(protocol_dict)


@pytest.fixture
def connection() -> MemoryConnection:
    return MemoryConnection()


@pytest.fixture
def dispatcher(connection: MemoryConnection, protocol: ProtocolDefinition) -> Dispatcher:
    return Dispatcher(connection, protocol)


@pytest.fixture
def protocol_file(tmp_path, protocol_dict: dict[str, Any]):
    """The sample protocol written to a JSON file."""
    path = tmp_path / "protocol.json"
    path.write_text(json.dumps(protocol_dict), encoding="utf-8")
    return path
