"""Request/response correlation and event fan-out over a connection.

The Dispatcher sits between application code and a message connection:
- send(): validates parameters against the schema, assigns the next request
  id, sends the envelope and waits for the reply with that id
- handle_message(): routes replies to their pending request and events to
  the listeners registered for the event's domain

All state (id counter, pending table, listener registry) belongs to one
instance and is only touched from the event loop that runs it.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .connection import Connection, Frame
from .errors import DispatcherClosedError, RequestTimeoutError
from .messages import ErrorObject, Request, decode_message, split_method
from .schema.index import SchemaIndex
from .schema.models import DomainDefinition, ProtocolDefinition
from .validation import validate_params

logger = logging.getLogger(__name__)

# Called with (event name, params); may return an awaitable
DomainListener = Callable[[str, Any], Any]

ENV_REQUEST_TIMEOUT = "PROTOCOL_DISPATCHER_REQUEST_TIMEOUT"
ENV_VALIDATE = "PROTOCOL_DISPATCHER_VALIDATE"


def _is_error(error: Any) -> bool:
    """Whether a reply's error member marks it as failed.

    Null, false, 0 and "" do not; any object, including {}, does.
    """
    if error is None or error is False or isinstance(error, str) and not error:
        return False
    return not (isinstance(error, int | float) and error == 0)


@dataclass
class DispatcherConfig:
    """Configuration for a Dispatcher."""

    # None waits for a reply forever
    request_timeout: float | None = None

    # Check domain, method and required parameters before sending
    validate: bool = True

    @classmethod
    def from_env(cls) -> DispatcherConfig:
        """Build a config from PROTOCOL_DISPATCHER_* environment variables."""
        timeout: float | None = None
        if raw_timeout := os.getenv(ENV_REQUEST_TIMEOUT):
            timeout = float(raw_timeout)
            if timeout <= 0:
                timeout = None

        validate = os.getenv(ENV_VALIDATE, "1").lower() not in ("0", "false", "no")
        return cls(request_timeout=timeout, validate=validate)


class Dispatcher:
    """Schema-driven command dispatcher over a message connection.

    Usage:
        dispatcher = Dispatcher(connection, ProtocolDefinition.from_file("protocol.json"))
        dispatcher.register_domain_listener("Page", on_page_event)
        result = await dispatcher.send("Page", "navigate", {"url": "http://x"})
    """

    def __init__(
        self,
        connection: Connection,
        protocol: ProtocolDefinition | Mapping[str, Any],
        config: DispatcherConfig | None = None,
    ) -> None:
        if not isinstance(protocol, ProtocolDefinition):
            protocol = ProtocolDefinition.from_dict(dict(protocol))

        self.config = config or DispatcherConfig()
        self._connection = connection
        self._protocol = protocol
        self._index = SchemaIndex(protocol)
        self._id = 0
        self._pending: dict[int, asyncio.Future[Any]] = {}
        self._domain_listeners: dict[str, list[DomainListener]] = {}
        self._listener_tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

        self._connection.on_message(self.handle_message)

    @property
    def protocol(self) -> ProtocolDefinition:
        return self._protocol

    @property
    def schema(self) -> SchemaIndex:
        return self._index

    @property
    def pending_count(self) -> int:
        """Number of requests still waiting for a reply."""
        return len(self._pending)

    @property
    def is_closed(self) -> bool:
        return self._closed

    # =========================================================================
    # Outbound
    # =========================================================================

    async def send(
        self,
        domain: str,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send ``domain.command`` and wait for its reply.

        Returns:
            The reply's ``result`` payload

        Raises:
            SchemaError: If validation fails; nothing is sent
            RemoteError: If the reply carries an error
            RequestTimeoutError: If a request timeout is configured and expires
            DispatcherClosedError: If the dispatcher is or gets closed
        """
        if self._closed:
            raise DispatcherClosedError("Dispatcher is closed")

        params = dict(params or {})
        if self.config.validate:
            validate_params(self._index, domain, command, params)

        self._id += 1
        request = Request(id=self._id, method=f"{domain}.{command}", params=params)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[request.id] = future

        try:
            sent = self._connection.send(request.to_json())
            if inspect.isawaitable(sent):
                await sent
        except BaseException:
            self._pending.pop(request.id, None)
            raise

        logger.debug(f"Sent request id={request.id} method={request.method}")

        timeout = self.config.request_timeout
        try:
            if timeout is None:
                return await future
            return await asyncio.wait_for(future, timeout=timeout)
        except TimeoutError:
            raise RequestTimeoutError(request.id, request.method, timeout) from None
        finally:
            # Cancelled or timed-out callers leave no entry behind
            self._pending.pop(request.id, None)

    # =========================================================================
    # Inbound
    # =========================================================================

    def handle_message(self, frame: Frame) -> None:
        """Route one inbound frame. Never raises for unknown ids or domains."""
        message = decode_message(frame)
        if message is None:
            return

        # A falsy id (absent, null or 0) means the frame is an event
        if message.get("id"):
            self._handle_reply(message)
            return

        method = message.get("method")
        if not isinstance(method, str):
            logger.warning(f"Dropping frame without id or method: {message!r:.200}")
            return

        domain, name = split_method(method)
        self._dispatch_event(domain, name, message.get("params"))

    def _handle_reply(self, message: dict[str, Any]) -> None:
        request_id = message["id"]
        try:
            future = self._pending.pop(request_id, None)
        except TypeError:
            # Unhashable id
            future = None

        if future is None:
            logger.debug(f"Received reply for unknown request: {request_id!r}")
            return
        if future.done():
            return

        if _is_error(message.get("error")):
            error = ErrorObject.from_reply(message["error"])
            logger.debug(f"Request id={request_id} failed: {error.message}")
            future.set_exception(error.to_exception())
        else:
            logger.debug(f"Request id={request_id} completed")
            future.set_result(message.get("result"))

    def _dispatch_event(self, domain: str, name: str, params: Any) -> None:
        listeners = self._domain_listeners.get(domain)
        if not listeners:
            logger.debug(f"No listeners for event {domain}.{name}")
            return

        logger.debug(f"Dispatching event {domain}.{name} to {len(listeners)} listener(s)")
        for listener in list(listeners):
            try:
                result = listener(name, params)
            except Exception:
                logger.exception(f"Error in listener for {domain}.{name}")
                continue

            if inspect.isawaitable(result):
                self._schedule_listener(result, f"{domain}.{name}")

    def _schedule_listener(self, awaitable: Any, event: str) -> None:
        task = asyncio.ensure_future(awaitable)
        self._listener_tasks.add(task)

        def _done(t: asyncio.Task[Any]) -> None:
            self._listener_tasks.discard(t)
            if not t.cancelled() and t.exception() is not None:
                logger.error(
                    f"Error in async listener for {event}",
                    exc_info=t.exception(),
                )

        task.add_done_callback(_done)

    # =========================================================================
    # Listener registry
    # =========================================================================

    def register_domain_listener(self, domain: str, handler: DomainListener) -> None:
        """Call ``handler(event_name, params)`` for every event of ``domain``.

        Listeners run in registration order. A handler may be registered
        more than once and is then called once per registration.
        """
        self._domain_listeners.setdefault(domain, []).append(handler)

    def remove_domain_listener(self, domain: str, handler: DomainListener) -> bool:
        """Remove the first registration of ``handler`` for ``domain``.

        Returns:
            True if a registration was removed
        """
        handlers = self._domain_listeners.get(domain)
        if not handlers:
            return False
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        if not handlers:
            del self._domain_listeners[domain]
        return True

    # =========================================================================
    # Introspection
    # =========================================================================

    def domain_event_names(self, domain: str) -> list[str]:
        return self._index.domain_event_names(domain)

    def domain_command_names(self, domain: str) -> list[str]:
        return self._index.domain_command_names(domain)

    def domain_commands(self, domain: str) -> dict[str, dict[str, Any]]:
        return self._index.domain_commands(domain)

    def domain_definition(self, domain: str) -> DomainDefinition | None:
        return self._index.domain_definition(domain)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Fail every pending request and refuse further sends.

        The underlying connection is left open; closing it is the owner's job.
        """
        if self._closed:
            return
        self._closed = True

        pending = list(self._pending.items())
        self._pending.clear()
        for request_id, future in pending:
            if not future.done():
                future.set_exception(
                    DispatcherClosedError(f"Dispatcher closed before reply to id={request_id}")
                )
        if pending:
            logger.info(f"Dispatcher closed with {len(pending)} pending request(s)")

    async def __aenter__(self) -> Dispatcher:
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.close()
