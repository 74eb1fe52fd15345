"""Shared fixtures — in-memory fake backend, fixed clock, and a wired TrackerStore.

Invariants:
    - FakeBackend speaks the real envelope protocol ({ok, data, error})
    - Every call is recorded with the exact (aliased) payload the bridge sent
    - Previous-mark lookup is per timer: latest marked_at_minute of the same timer

Design Decisions:
    - Fake at the transport boundary, not at the store: the bridge, alias
      normalizer, and unwrapper all run for real in service tests
"""

import itertools

import pytest

from countdown_todo.core.time_format import to_minute
from countdown_todo.services.command_bridge import CommandBridge
from countdown_todo.services.tracker_store import TrackerStore

NOW_MINUTE = 29_000_000
NOW_MS = NOW_MINUTE * 60_000


class FakeClock:
    """Epoch-millis clock that only moves when told to."""

    def __init__(self, millis: int = NOW_MS):
        self.millis = millis

    def __call__(self) -> int:
        return self.millis

    def advance_minutes(self, minutes: int) -> None:
        self.millis += minutes * 60_000

    @property
    def minute(self) -> int:
        return to_minute(self.millis)


class FakeBackend:
    """Minimal command executor mirroring the desktop backend's rules."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.timers: dict[str, dict] = {}
        self.marks: list[dict] = []
        self.todos: dict[str, dict] = {}
        self.overrides: dict[str, object] = {}
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]

    async def invoke(self, command: str, payload: dict):
        self.calls.append((command, payload))
        if command in self.overrides:
            return self.overrides.pop(command)
        handler = getattr(self, f"_{command}", None)
        if handler is None:
            return _fail(f"unknown command {command}")
        return handler(payload)

    # --- Timers ---------------------------------------------------------------

    def _timer_list(self, p):
        include = p["include_archived"]
        return _ok([t for t in self.timers.values() if include or not t["archived"]])

    def _timer_create(self, p):
        name = p["name"].strip()
        if not name:
            return _fail("validation failed: timer name cannot be empty")
        timer = {
            "id": self._next_id("timer"), "name": name,
            "target_at_minute": p["target_at_minute"],
            "created_at_minute": p["now_minute"],
            "updated_at_minute": p["now_minute"], "archived": False,
        }
        self.timers[timer["id"]] = timer
        return _ok(timer)

    def _timer_update(self, p):
        timer = self.timers.get(p["timer_id"])
        if timer is None:
            return _fail(f"not found: timer {p['timer_id']}")
        timer.update(
            name=p["name"], target_at_minute=p["target_at_minute"],
            updated_at_minute=p["now_minute"],
        )
        return _ok(timer)

    def _timer_archive(self, p):
        timer = self.timers.get(p["timer_id"])
        if timer is None:
            return _fail(f"not found: timer {p['timer_id']}")
        timer["archived"] = True
        return _ok(None)

    # --- Marks ----------------------------------------------------------------

    def _mark_list_by_timer(self, p):
        return _ok([m for m in self.marks if m["timer_id"] == p["timer_id"]])

    def _mark_create(self, p):
        if p["timer_id"] not in self.timers:
            return _fail(f"not found: timer {p['timer_id']}")
        previous = [m for m in self.marks if m["timer_id"] == p["timer_id"]]
        prev = max((m["marked_at_minute"] for m in previous), default=None)
        mark = {
            "id": self._next_id("mark"), "timer_id": p["timer_id"],
            "marked_at_minute": p["marked_at_minute"],
            "prev_marked_at_minute": prev,
            "duration_minutes": None if prev is None else p["marked_at_minute"] - prev,
            "description": p["description"], "todo_ids": list(p["todo_ids"]),
        }
        self.marks.append(mark)
        return _ok(mark)

    # --- Todos ----------------------------------------------------------------

    def _todo_list_by_timer(self, p):
        return _ok([t for t in self.todos.values() if t["timer_id"] == p["timer_id"]])

    def _todo_create(self, p):
        todo = {
            "id": self._next_id("todo"), "timer_id": p["timer_id"],
            "title": p["title"], "status": "open",
            "created_at_minute": p["now_minute"],
            "updated_at_minute": p["now_minute"], "done_at_minute": None,
        }
        self.todos[todo["id"]] = todo
        return _ok(todo)

    def _todo_update_status(self, p):
        todo = self.todos.get(p["todo_id"])
        if todo is None:
            return _fail(f"not found: todo {p['todo_id']}")
        todo.update(
            status=p["status"], updated_at_minute=p["now_minute"],
            done_at_minute=p["now_minute"] if p["status"] == "done" else None,
        )
        return _ok(todo)

    def _todo_delete(self, p):
        todo = self.todos.pop(p["todo_id"], None)
        if todo is None:
            return _fail(f"not found: todo {p['todo_id']}")
        return _ok(todo)

    def _open_data_dir(self, p):
        return _ok(None)


def _ok(data):
    return {"ok": True, "data": data}


def _fail(message: str):
    return {"ok": False, "error": {"code": "VALIDATION", "message": message}}


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(backend, clock):
    return TrackerStore(CommandBridge({"invoke": backend.invoke}), clock=clock)
