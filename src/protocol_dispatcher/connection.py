"""Connection abstraction consumed by the dispatcher.

The dispatcher does not open, close or frame connections. It only needs:
- on_message: register a callback invoked once per inbound frame
- send: hand over one serialized envelope (sync or async)

Any websocket, pipe or socket wrapper exposing these two members works.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

Frame = str | bytes | Mapping[str, Any]
MessageHandler = Callable[[Frame], None]


@runtime_checkable
class Connection(Protocol):
    """Protocol for message-oriented connections."""

    def on_message(self, handler: MessageHandler) -> None:
        """Register a handler called with each inbound frame."""
        ...

    def send(self, data: str) -> Awaitable[None] | None:
        """Send one serialized envelope.

        May be a plain or a coroutine function; the dispatcher awaits the
        result when it is awaitable.
        """
        ...


class MemoryConnection:
    """In-memory connection for tests and embedding.

    Records every outbound frame and lets the caller feed inbound frames.
    No actual I/O.

    Usage:
        conn = MemoryConnection()
        dispatcher = Dispatcher(conn, protocol)
        task = asyncio.create_task(dispatcher.send("Page", "enable"))
        await asyncio.sleep(0)
        conn.feed({"id": conn.sent_messages[-1]["id"], "result": {}})
    """

    def __init__(self) -> None:
        self._handlers: list[MessageHandler] = []
        self._sent: list[str] = []

    @property
    def sent(self) -> list[str]:
        """Raw outbound frames, oldest first."""
        return self._sent.copy()

    @property
    def sent_messages(self) -> list[dict[str, Any]]:
        """Outbound frames decoded from JSON."""
        return [json.loads(frame) for frame in self._sent]

    def on_message(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    def send(self, data: str) -> None:
        self._sent.append(data)

    def feed(self, frame: Frame) -> None:
        """Deliver an inbound frame to every registered handler."""
        if isinstance(frame, Mapping):
            frame = json.dumps(frame)
        for handler in list(self._handlers):
            handler(frame)

    def clear(self) -> None:
        """Forget recorded outbound frames."""
        self._sent.clear()
