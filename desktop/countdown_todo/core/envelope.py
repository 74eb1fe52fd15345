"""Envelope Unwrapping — the single chokepoint every command result passes through.

Invariants:
    - Absent or non-object response -> EmptyResponseError(command_name)
    - ok falsy -> CommandFailedError, message from error.message, message, or generic
    - ok truthy -> data returned unchanged (None, 0, [] included)
    - Single step, no retries

Design Decisions:
    - Pure function taking the raw response: transport concerns stay in the bridge
"""

from collections.abc import Mapping
from typing import Any

from countdown_todo.core.errors import CommandFailedError, EmptyResponseError


def unwrap_envelope(command_name: str, response: object) -> Any:
    """Validate an {ok, data, error} envelope and return its data."""
    if response is None or not isinstance(response, Mapping):
        raise EmptyResponseError(command_name)

    if not response.get("ok"):
        raise CommandFailedError(
            _failure_message(command_name, response), command_name,
        )

    return response.get("data")


def _failure_message(command_name: str, response: Mapping) -> str:
    error = response.get("error")
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    if response.get("message"):
        return str(response["message"])
    return f"命令 {command_name} 执行失败"
