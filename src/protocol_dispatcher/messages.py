"""Wire envelopes exchanged over the connection.

Request (client -> peer):
    {"id": 1, "method": "Page.navigate", "params": {"url": "http://x"}}

Reply (peer -> client), success or error:
    {"id": 1, "result": {"frameId": "F1"}}
    {"id": 1, "error": {"code": -32000, "message": "Cannot navigate"}}

Event (peer -> client), no id:
    {"method": "Page.loaded", "params": {"frameId": "F1"}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from .errors import RemoteError

logger = logging.getLogger(__name__)


class Request(BaseModel):
    """An outbound command envelope."""

    id: int
    method: str
    params: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize for the connection's send primitive."""
        return self.model_dump_json()


def _message_text(message: Any) -> str:
    return "Unknown error" if message is None else str(message)


class ErrorObject(BaseModel):
    """The ``error`` member of an error reply."""

    message: str
    code: int | None = None
    data: Any | None = None

    @classmethod
    def from_reply(cls, error: Any) -> ErrorObject:
        """Read an error member leniently; peers do not always follow the shape."""
        if isinstance(error, Mapping):
            code = error.get("code")
            return cls(
                message=_message_text(error.get("message")),
                code=code if isinstance(code, int) else None,
                data=error.get("data"),
            )
        return cls(message=str(error))

    def to_exception(self) -> RemoteError:
        return RemoteError(self.message, code=self.code, data=self.data)


def decode_message(raw: str | bytes | Mapping[str, Any]) -> dict[str, Any] | None:
    """Decode one inbound frame into a message dict.

    Returns None (after logging) for frames that are not JSON objects.
    """
    if isinstance(raw, Mapping):
        return dict(raw)

    if isinstance(raw, bytes | bytearray):
        raw = raw.decode("utf-8", errors="replace")

    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Dropping undecodable frame: {e}")
        return None

    if not isinstance(message, dict):
        logger.warning(f"Dropping non-object frame: {type(message).__name__}")
        return None
    return message


def split_method(method: str) -> tuple[str, str]:
    """Split ``"Domain.member"`` at the first dot.

    Further dots stay in the member (``"A.b.c"`` -> ``("A", "b.c")``).
    Without a dot the domain is empty and the member is the whole method.
    """
    dot = method.find(".")
    if dot < 0:
        return "", method
    return method[:dot], method[dot + 1 :]
