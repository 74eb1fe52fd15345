"""Tracker State — in-memory collections and selection for one client session.

Invariants:
    - At most one timer is selected; None means nothing selected
    - marks and todos always belong to the selected timer (empty when none)
    - Changing selection clears both pending-insert sets, even when reselecting
      the same timer; scoped marks/todos are discarded and refetched by the shell
    - A deleted todo id never stays in a pending-insert set
    - compact_mode / compact_precision are local preferences, not backend data

Design Decisions:
    - Pure dataclass with mutation helpers: the store applies them only after
      a confirmed success envelope, so there is nothing to roll back
    - Pending sets keyed by DraftView: one set per draft surface
"""

from dataclasses import dataclass, field

from countdown_todo.core.domain_types import CountdownPrecision, DraftView
from countdown_todo.core.draft_text import open_todos
from countdown_todo.core.record_protocols import TimerLike, TodoLike


@dataclass
class TrackerState:
    """Per-process UI/domain state. Pure dataclass, no IO."""

    timers: list = field(default_factory=list)
    selected_timer_id: str | None = None
    marks: list = field(default_factory=list)
    todos: list = field(default_factory=list)

    # Todo ids already appended into each draft mark description
    inserted_todo_ids: set[str] = field(default_factory=set)
    compact_inserted_todo_ids: set[str] = field(default_factory=set)

    compact_mode: bool = False
    compact_precision: CountdownPrecision = CountdownPrecision.MINUTE

    @property
    def selected_timer(self) -> TimerLike | None:
        return next(
            (t for t in self.timers if t.id == self.selected_timer_id), None,
        )

    @property
    def has_timers(self) -> bool:
        return len(self.timers) > 0

    @property
    def open_todos(self) -> list[TodoLike]:
        return open_todos(self.todos)

    def find_todo(self, todo_id: str) -> TodoLike | None:
        return next((t for t in self.todos if t.id == todo_id), None)

    def pending(self, view: DraftView) -> set[str]:
        if DraftView(view) is DraftView.COMPACT:
            return self.compact_inserted_todo_ids
        return self.inserted_todo_ids

    def clear_pending(self) -> None:
        self.inserted_todo_ids.clear()
        self.compact_inserted_todo_ids.clear()

    def clear_scope(self) -> None:
        """Drop everything scoped to the selected timer."""
        self.marks = []
        self.todos = []
        self.clear_pending()

    def select(self, timer_id: str | None) -> None:
        self.selected_timer_id = timer_id or None
        self.clear_scope()

    def replace_timers(self, timers: list) -> None:
        """Install a fresh timer list and repair the selection against it."""
        previous = self.selected_timer_id
        self.timers = list(timers)
        ids = {t.id for t in self.timers}
        if self.selected_timer_id is not None and self.selected_timer_id not in ids:
            self.selected_timer_id = None
        if self.selected_timer_id is None and self.timers:
            self.selected_timer_id = self.timers[0].id
        if self.selected_timer_id != previous:
            self.clear_scope()

    def forget_todo(self, todo_id: str) -> None:
        self.todos = [t for t in self.todos if t.id != todo_id]
        self.inserted_todo_ids.discard(todo_id)
        self.compact_inserted_todo_ids.discard(todo_id)
