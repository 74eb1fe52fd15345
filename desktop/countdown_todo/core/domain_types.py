"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TimerId, MarkId, TodoId are opaque backend-assigned strings
    - EpochMinute is Unix-epoch milliseconds // 60000 (timezone independent)
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize into command payloads without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TimerId = NewType("TimerId", str)
MarkId = NewType("MarkId", str)
TodoId = NewType("TodoId", str)


# ─── Value Types ─────────────────────────────────────────────────

EpochMinute = NewType("EpochMinute", int)
EpochMillis = NewType("EpochMillis", int)

MINUTES_PER_HOUR: int = 60
MINUTES_PER_DAY: int = 1440
MILLIS_PER_MINUTE: int = 60_000


# ─── Enums ───────────────────────────────────────────────────────

class TodoStatus(str, Enum):
    """Todo lifecycle: created open, toggled any number of times."""
    OPEN = "open"
    DONE = "done"

    @property
    def toggled(self) -> "TodoStatus":
        return TodoStatus.OPEN if self is TodoStatus.DONE else TodoStatus.DONE


class UrgencyTier(str, Enum):
    """Five ordered urgency bands for a signed remaining-minute value."""
    OVERDUE = "overdue"
    DANGER = "danger"
    WARNING = "warning"
    NORMAL = "normal"
    RELAXED = "relaxed"

    @property
    def rank(self) -> int:
        """Higher rank = more urgent. overdue=4 ... relaxed=0."""
        return _URGENCY_RANK[self]


_URGENCY_RANK = {
    UrgencyTier.OVERDUE: 4,
    UrgencyTier.DANGER: 3,
    UrgencyTier.WARNING: 2,
    UrgencyTier.NORMAL: 1,
    UrgencyTier.RELAXED: 0,
}


class CountdownPrecision(str, Enum):
    """Granularity of the compact live countdown. Cycled by user action."""
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"

    @property
    def next(self) -> "CountdownPrecision":
        order = list(CountdownPrecision)
        return order[(order.index(self) + 1) % len(order)]


class DraftView(str, Enum):
    """The two draft surfaces that each keep their own pending-insert set."""
    PRIMARY = "primary"
    COMPACT = "compact"


class Command(str, Enum):
    """Backend command names. The value is what goes over the bridge."""
    TIMER_LIST = "timer_list"
    TIMER_CREATE = "timer_create"
    TIMER_UPDATE = "timer_update"
    TIMER_ARCHIVE = "timer_archive"
    MARK_LIST_BY_TIMER = "mark_list_by_timer"
    MARK_CREATE = "mark_create"
    TODO_LIST_BY_TIMER = "todo_list_by_timer"
    TODO_CREATE = "todo_create"
    TODO_UPDATE_STATUS = "todo_update_status"
    TODO_DELETE = "todo_delete"
    OPEN_DATA_DIR = "open_data_dir"
