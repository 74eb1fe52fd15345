"""Record Schemas — Pydantic models for Timer, Mark, and Todo as returned by the backend.

Invariants:
    - Field names are snake_case; camelCase aliases accepted on input
    - Unknown fields ignored (backend revisions add columns freely)
    - Mark.prev_marked_at_minute / duration_minutes are Optional, never sentinels
    - Mark.todo_ids may reference deleted todos; kept as opaque ids

Design Decisions:
    - alias_generator + populate_by_name: parses both backend naming revisions
      without a second set of models
    - TypeAdapter for list payloads: one validation pass per refresh
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from countdown_todo.core.domain_types import (
    EpochMinute, MarkId, TimerId, TodoId, TodoStatus,
)


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        extra="ignore", frozen=True,
    )


class Timer(_Record):
    """A named deadline."""
    id: TimerId
    name: str = Field(min_length=1)
    target_at_minute: EpochMinute
    created_at_minute: EpochMinute
    updated_at_minute: EpochMinute | None = None
    archived: bool = False


class Mark(_Record):
    """A check-in against a timer. Immutable once created."""
    id: MarkId
    timer_id: TimerId
    marked_at_minute: EpochMinute
    prev_marked_at_minute: EpochMinute | None = None
    duration_minutes: int | None = None
    description: str = ""
    todo_ids: list[TodoId] = Field(default_factory=list)

    @property
    def is_first(self) -> bool:
        return self.prev_marked_at_minute is None


class Todo(_Record):
    """An open/done task scoped to a timer."""
    id: TodoId
    timer_id: TimerId
    title: str = Field(min_length=1)
    status: TodoStatus = TodoStatus.OPEN
    created_at_minute: EpochMinute
    updated_at_minute: EpochMinute | None = None
    done_at_minute: EpochMinute | None = None

    @property
    def is_done(self) -> bool:
        return self.status is TodoStatus.DONE


_TIMERS = TypeAdapter(list[Timer])
_MARKS = TypeAdapter(list[Mark])
_TODOS = TypeAdapter(list[Todo])


def parse_timers(data: object) -> list[Timer]:
    return _TIMERS.validate_python(data or [])


def parse_marks(data: object) -> list[Mark]:
    return _MARKS.validate_python(data or [])


def parse_todos(data: object) -> list[Todo]:
    return _TODOS.validate_python(data or [])
