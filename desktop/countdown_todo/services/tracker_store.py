"""Tracker Store — owns TrackerState and exposes every backend-facing operation.

Invariants:
    - State changes only after a confirmed success envelope (nothing optimistic,
      nothing to roll back); failures propagate to the caller unchanged
    - Local preconditions (blank name, unparsable target, no selection, bad
      status) raise ValidationError before any command is sent
    - Mark/todo commands never go out with a null timer id
    - Records returned for a timer that is no longer selected are not applied
      (the user may switch timers while a command is in flight)
    - A created mark or todo already present from a concurrent refetch is not
      appended twice
    - Timer mutations refetch the timer list so selection repair runs in one place

Design Decisions:
    - Clock injected as an epoch-millis callable: deterministic tests, and the
      SECOND-precision countdown reads the same clock
    - Explicit command table per operation, no generic CRUD helper: every
      payload is visible where it is built
"""

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError as RecordValidationError

from countdown_todo.core.domain_types import (
    Command, CountdownPrecision, DraftView, TodoStatus,
)
from countdown_todo.core.draft_text import append_lines, todo_line
from countdown_todo.core.errors import InvalidRecordError, ValidationError
from countdown_todo.core.time_format import now_millis, parse_date_minute, to_minute
from countdown_todo.core.timer_view import TimerView, derive_timer_views
from countdown_todo.core.tracker_state import TrackerState
from countdown_todo.infrastructure.preferences import PreferenceStore
from countdown_todo.schemas.records import (
    Mark, Timer, Todo, parse_marks, parse_timers, parse_todos,
)
from countdown_todo.services.command_bridge import CommandBridge

logger = logging.getLogger(__name__)

NO_TIMER_SELECTED = "请先选择 Timer"


def _parse(command: Command, parser: Callable, data: object):
    try:
        return parser(data)
    except RecordValidationError as e:
        raise InvalidRecordError(command.value, str(e)) from e


def _require_target(target: int | str | None) -> int:
    if isinstance(target, bool):
        target = None
    if isinstance(target, str):
        target = parse_date_minute(target)
    if not isinstance(target, int):
        raise ValidationError("截止时间格式无效", field="target_at_minute")
    return target


def _require_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Timer 名称不能为空", field="name")
    return name


class TrackerStore:
    """Domain state store. Every operation is bridge call + unwrap + local update."""

    def __init__(
        self,
        bridge: CommandBridge,
        state: TrackerState | None = None,
        clock: Callable[[], int] = now_millis,
        preferences: PreferenceStore | None = None,
    ):
        self.bridge = bridge
        self.state = state or TrackerState()
        self._clock = clock
        self._preferences = preferences

    def now_minute(self) -> int:
        return to_minute(self._clock())

    def _selected_id(self) -> str:
        timer_id = self.state.selected_timer_id
        if not timer_id:
            raise ValidationError(NO_TIMER_SELECTED, field="timer_id")
        return timer_id

    # ─── Timers ──────────────────────────────────────────────────

    async def list_timers(self, include_archived: bool = False) -> list[Timer]:
        data = await self.bridge.invoke_envelope(
            Command.TIMER_LIST, {"include_archived": include_archived},
        )
        timers = _parse(Command.TIMER_LIST, parse_timers, data)
        self.state.replace_timers(timers)
        return timers

    async def create_timer(
        self, name: str, target_at_minute: int | str | None,
        now_minute: int | None = None,
    ) -> Timer:
        name = _require_name(name)
        target = _require_target(target_at_minute)
        data = await self.bridge.invoke_envelope(Command.TIMER_CREATE, {
            "name": name,
            "target_at_minute": target,
            "now_minute": self.now_minute() if now_minute is None else now_minute,
        })
        timer = _parse(Command.TIMER_CREATE, Timer.model_validate, data)
        logger.info(f"Timer created: {timer.name}", extra={"timer_id": timer.id})
        await self.refresh()
        return timer

    async def update_timer(
        self, timer_id: str, name: str, target_at_minute: int | str | None,
        now_minute: int | None = None,
    ) -> Timer:
        name = _require_name(name)
        target = _require_target(target_at_minute)
        data = await self.bridge.invoke_envelope(Command.TIMER_UPDATE, {
            "timer_id": timer_id,
            "name": name,
            "target_at_minute": target,
            "now_minute": self.now_minute() if now_minute is None else now_minute,
        })
        timer = _parse(Command.TIMER_UPDATE, Timer.model_validate, data)
        await self.list_timers()
        return timer

    async def archive_timer(self, timer_id: str, now_minute: int | None = None) -> None:
        """Archive a timer. Archiving the selected one clears selection and scope.

        The follow-up list refresh may auto-select the first remaining timer;
        its marks and todos are not fetched here.
        """
        await self.bridge.invoke_envelope(Command.TIMER_ARCHIVE, {
            "timer_id": timer_id,
            "now_minute": self.now_minute() if now_minute is None else now_minute,
        })
        logger.info("Timer archived", extra={"timer_id": timer_id})
        if self.state.selected_timer_id == timer_id:
            self.state.select(None)
        await self.list_timers()

    # ─── Selection ───────────────────────────────────────────────

    async def select_timer(self, timer_id: str | None) -> None:
        """Switch the active timer and refetch its marks and todos."""
        self.state.select(timer_id)
        await self.refresh_marks_and_todos()

    async def refresh(self) -> None:
        await self.list_timers()
        await self.refresh_marks_and_todos()

    async def refresh_marks_and_todos(self) -> None:
        await self.list_marks_for_selected()
        await self.list_todos_for_selected()

    # ─── Marks ───────────────────────────────────────────────────

    async def list_marks_for_selected(self) -> list[Mark]:
        timer_id = self.state.selected_timer_id
        if not timer_id:
            self.state.marks = []
            return []
        data = await self.bridge.invoke_envelope(
            Command.MARK_LIST_BY_TIMER, {"timer_id": timer_id},
        )
        marks = _parse(Command.MARK_LIST_BY_TIMER, parse_marks, data)
        if self.state.selected_timer_id == timer_id:
            self.state.marks = marks
        return marks

    async def create_mark(self, description: str, todo_ids: Iterable[str] = ()) -> Mark:
        timer_id = self._selected_id()
        data = await self.bridge.invoke_envelope(Command.MARK_CREATE, {
            "timer_id": timer_id,
            "marked_at_minute": self.now_minute(),
            "description": description,
            "todo_ids": list(todo_ids),
        })
        mark = _parse(Command.MARK_CREATE, Mark.model_validate, data)
        if self.state.selected_timer_id == mark.timer_id and not any(
            m.id == mark.id for m in self.state.marks
        ):
            self.state.marks = [*self.state.marks, mark]
        return mark

    async def submit_mark(
        self, description: str, view: DraftView = DraftView.PRIMARY,
    ) -> Mark:
        """Create a mark linking the view's pending todos, then clear the ids it sent."""
        pending = self.state.pending(view)
        submitted = set(pending)
        mark = await self.create_mark(description, sorted(submitted))
        # ids inserted while the request was in flight stay pending
        pending.difference_update(submitted)
        return mark

    def sorted_marks(self) -> list[Mark]:
        """Newest first, the order marks are listed in."""
        return sorted(self.state.marks, key=lambda m: m.marked_at_minute, reverse=True)

    # ─── Draft insertion ─────────────────────────────────────────

    def insert_todo(
        self, todo_id: str, draft: str, view: DraftView = DraftView.PRIMARY,
    ) -> str:
        """Append one todo line to draft; already-inserted todos are skipped."""
        todo = self.state.find_todo(todo_id)
        if todo is None:
            raise ValidationError("Todo 不存在", field="todo_id")
        pending = self.state.pending(view)
        if todo.id in pending:
            return draft
        pending.add(todo.id)
        return append_lines(draft, [todo_line(todo)])

    def insert_open_todos(
        self, draft: str, view: DraftView = DraftView.COMPACT,
    ) -> str:
        """Append every open todo not yet in the draft."""
        candidates = self.state.open_todos
        if not candidates:
            raise ValidationError("没有进行中的 Todo 可插入", field="todo_ids")
        pending = self.state.pending(view)
        fresh = [t for t in candidates if t.id not in pending]
        pending.update(t.id for t in fresh)
        logger.debug(
            f"Inserted {len(fresh)} open todos", extra={"view": DraftView(view).value},
        )
        return append_lines(draft, [todo_line(t) for t in fresh])

    # ─── Todos ───────────────────────────────────────────────────

    async def list_todos_for_selected(self) -> list[Todo]:
        timer_id = self.state.selected_timer_id
        if not timer_id:
            self.state.todos = []
            return []
        data = await self.bridge.invoke_envelope(
            Command.TODO_LIST_BY_TIMER, {"timer_id": timer_id},
        )
        todos = _parse(Command.TODO_LIST_BY_TIMER, parse_todos, data)
        if self.state.selected_timer_id == timer_id:
            self.state.todos = todos
        return todos

    async def create_todo(self, title: str) -> Todo:
        timer_id = self._selected_id()
        title = (title or "").strip()
        if not title:
            raise ValidationError("Todo 内容不能为空", field="title")
        data = await self.bridge.invoke_envelope(Command.TODO_CREATE, {
            "timer_id": timer_id,
            "title": title,
            "now_minute": self.now_minute(),
        })
        todo = _parse(Command.TODO_CREATE, Todo.model_validate, data)
        if (
            self.state.selected_timer_id == todo.timer_id
            and self.state.find_todo(todo.id) is None
        ):
            self.state.todos = [*self.state.todos, todo]
        return todo

    async def update_todo_status(self, todo_id: str, status: TodoStatus | str) -> Todo:
        try:
            status = TodoStatus(status)
        except ValueError:
            raise ValidationError(f"无效的 Todo 状态: {status}", field="status") from None
        data = await self.bridge.invoke_envelope(Command.TODO_UPDATE_STATUS, {
            "todo_id": todo_id,
            "status": status.value,
            "now_minute": self.now_minute(),
        })
        todo = _parse(Command.TODO_UPDATE_STATUS, Todo.model_validate, data)
        self.state.todos = [todo if t.id == todo.id else t for t in self.state.todos]
        return todo

    async def toggle_todo(self, todo_id: str) -> Todo:
        todo = self.state.find_todo(todo_id)
        if todo is None:
            raise ValidationError("Todo 不存在", field="todo_id")
        return await self.update_todo_status(todo_id, todo.status.toggled)

    async def delete_todo(self, todo_id: str) -> None:
        await self.bridge.invoke_envelope(Command.TODO_DELETE, {"todo_id": todo_id})
        self.state.forget_todo(todo_id)
        logger.info("Todo deleted", extra={"todo_id": todo_id})

    # ─── Misc ────────────────────────────────────────────────────

    async def open_data_dir(self) -> None:
        await self.bridge.invoke_envelope(Command.OPEN_DATA_DIR, {})

    # ─── Local preferences ───────────────────────────────────────

    def load_preferences(self) -> None:
        if self._preferences is None:
            return
        self.state.compact_mode = self._preferences.compact_mode()
        self.state.compact_precision = self._preferences.compact_precision()

    def set_compact_mode(self, enabled: bool) -> None:
        self.state.compact_mode = enabled
        if self._preferences is not None:
            self._preferences.set_compact_mode(enabled)

    def cycle_compact_precision(self) -> CountdownPrecision:
        precision = self.state.compact_precision.next
        self.state.compact_precision = precision
        if self._preferences is not None:
            self._preferences.set_compact_precision(precision)
        return precision

    # ─── Derived values ──────────────────────────────────────────

    def views(self, now_ms: int | None = None) -> list[TimerView]:
        return derive_timer_views(
            self.state.timers,
            self.state.selected_timer_id,
            self.state.compact_precision,
            self._clock() if now_ms is None else now_ms,
        )
