"""Command Bridge — finds the host's invoke transport and sends aliased payloads.

Invariants:
    - Transport probed per call in fixed order: host.invoke, host.tauri.invoke,
      host.core.invoke; first present wins
    - No transport -> TransportUnavailableError, no call attempted, never a silent no-op
    - A transport that raises or rejects surfaces as CommandFailedError carrying
      the resolved message; raw host exceptions never escape
    - Every payload passes through with_payload_aliases before sending
    - invoke_envelope is the only path store operations use (bridge + unwrap)

Design Decisions:
    - Host resolved lazily on every call: the runtime may inject its bridge
      after the client is constructed
    - Attribute and mapping lookup both accepted: hosts arrive as objects or dicts
    - Sync and async transports both accepted; awaitables are awaited
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from countdown_todo.core.domain_types import Command
from countdown_todo.core.envelope import unwrap_envelope
from countdown_todo.core.errors import (
    CommandFailedError, CountdownTodoError, ErrorContext,
    TransportUnavailableError, format_error_message,
)
from countdown_todo.core.payload_aliases import with_payload_aliases

logger = logging.getLogger(__name__)

# Historical host shapes, in probe order
TRANSPORT_PATHS: tuple[tuple[str, ...], ...] = (
    ("invoke",),
    ("tauri", "invoke"),
    ("core", "invoke"),
)

Transport = Callable[[str, dict], Any]


def _lookup(obj: object, path: tuple[str, ...]) -> object:
    for name in path:
        if obj is None:
            return None
        if isinstance(obj, Mapping):
            obj = obj.get(name)
        else:
            obj = getattr(obj, name, None)
    return obj


def resolve_transport(host: object) -> Transport | None:
    """Return the first callable invoke found on host, or None."""
    for path in TRANSPORT_PATHS:
        candidate = _lookup(host, path)
        if callable(candidate):
            return candidate
    return None


def command_name(command: Command | str) -> str:
    return command.value if isinstance(command, Command) else command


class CommandBridge:
    """Sends (command, payload) to whichever transport the host exposes."""

    def __init__(self, host: object = None):
        # host may be the runtime global itself or a zero-arg provider of it
        self._host = host

    def _current_host(self) -> object:
        host = self._host
        if callable(host) and resolve_transport(host) is None:
            return host()
        return host

    async def invoke(
        self, command: Command | str, payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one command and return the raw (still enveloped) response."""
        name = command_name(command)
        transport = resolve_transport(self._current_host())
        if transport is None:
            raise TransportUnavailableError(ErrorContext(command_name=name))

        try:
            result = transport(name, with_payload_aliases(payload))
            if inspect.isawaitable(result):
                result = await result
        except CountdownTodoError:
            raise
        except Exception as e:
            raise CommandFailedError(format_error_message(e), name) from e
        return result

    async def invoke_envelope(
        self, command: Command | str, payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send one command and return its unwrapped data, or raise."""
        name = command_name(command)
        logger.debug(f"Invoking {name}", extra={"command": name})
        try:
            response = await self.invoke(name, payload)
            return unwrap_envelope(name, response)
        except CountdownTodoError as e:
            logger.warning(
                f"Command {name} failed: {e.message}",
                extra={"command": name, "error_code": e.code},
            )
            raise
