"""Draft Text — pure helpers for appending todo lines to a draft mark description."""

from collections.abc import Iterable

from countdown_todo.core.domain_types import TodoStatus
from countdown_todo.core.record_protocols import TodoLike


def todo_line(todo: TodoLike) -> str:
    return f"- {todo.title}"


def append_lines(text: str, lines: Iterable[str]) -> str:
    """Append lines to text, separated by a newline only when text has content."""
    body = "\n".join(lines)
    if not body:
        return text
    prefix = "\n" if text.strip() else ""
    return f"{text}{prefix}{body}"


def open_todos(todos: Iterable[TodoLike]) -> list[TodoLike]:
    return [t for t in todos if t.status != TodoStatus.DONE]
