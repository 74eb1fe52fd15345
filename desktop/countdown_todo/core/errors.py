"""Error Hierarchy — typed, categorized exceptions for every client failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - CommandFailedError carries the backend message unmodified
    - ValidationError is raised before any command is sent
    - format_error_message() never returns None or an empty string

Design Decisions:
    - Single hierarchy with CountdownTodoError base: one except clause per UI action
    - ErrorContext as dataclass: observability without coupling to logging
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


UNKNOWN_ERROR_MESSAGE = "未知错误"
TRANSPORT_UNAVAILABLE_MESSAGE = "Tauri invoke 不可用，请在桌面应用内运行。"


class ErrorSeverity(str, Enum):
    """Error severity for observability and notification styling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    TRANSPORT = "transport"
    CONTRACT = "contract"
    BACKEND = "backend"
    VALIDATION = "validation"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    command_name: str | None = None
    timer_id: str | None = None
    debug_info: dict[str, Any] | None = None


class CountdownTodoError(Exception):
    """Base exception for all client errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_notification(self) -> dict:
        """Shape for the single transient notification shown per failure."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "command": self.context.command_name,
        }


class TransportUnavailableError(CountdownTodoError):
    """No host invocation mechanism was found."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            TRANSPORT_UNAVAILABLE_MESSAGE, "TRANSPORT_UNAVAILABLE",
            ErrorCategory.TRANSPORT, ErrorSeverity.CRITICAL, context,
        )


class EmptyResponseError(CountdownTodoError):
    """Backend returned no envelope, or something that is not an object."""
    def __init__(self, command_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.command_name = command_name
        super().__init__(
            f"命令 {command_name} 返回了空响应", "EMPTY_RESPONSE",
            ErrorCategory.CONTRACT, ErrorSeverity.ERROR, ctx,
        )
        self.command_name = command_name


class CommandFailedError(CountdownTodoError):
    """Backend reported ok=false. Message is shown to the user verbatim."""
    def __init__(
        self, message: str, command_name: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.command_name = command_name
        super().__init__(
            message, "COMMAND_FAILED", ErrorCategory.BACKEND,
            ErrorSeverity.ERROR, ctx,
        )
        self.command_name = command_name


class InvalidRecordError(CountdownTodoError):
    """Envelope was ok but its data does not match the record shape."""
    def __init__(
        self, command_name: str, detail: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.command_name = command_name
        ctx.debug_info = {"detail": detail}
        super().__init__(
            f"命令 {command_name} 返回了无效数据", "INVALID_RECORD",
            ErrorCategory.CONTRACT, ErrorSeverity.ERROR, ctx,
        )
        self.command_name = command_name


class ValidationError(CountdownTodoError):
    """Local precondition failed (blank name, no timer selected, bad date)."""
    def __init__(
        self, message: str, field: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )
        self.field = field


def format_error_message(error: object) -> str:
    """Resolve any raised value into a user-facing message."""
    if isinstance(error, BaseException):
        message = getattr(error, "message", None) or str(error)
        if message:
            return message
        return UNKNOWN_ERROR_MESSAGE

    if isinstance(error, str) and error.strip():
        return error

    if isinstance(error, Mapping):
        nested = error.get("error")
        candidates = (
            error.get("message"),
            nested.get("message") if isinstance(nested, Mapping) else None,
            nested,
            error.get("reason"),
            error.get("details"),
        )
        for candidate in candidates:
            if isinstance(candidate, str) and candidate.strip():
                return candidate
        try:
            return json.dumps(error, ensure_ascii=False)
        except (TypeError, ValueError):
            return UNKNOWN_ERROR_MESSAGE

    return UNKNOWN_ERROR_MESSAGE
