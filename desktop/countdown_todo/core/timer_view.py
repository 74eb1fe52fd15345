"""Timer View — per-tick display values derived from already-fetched timers.

Invariants:
    - Derived on demand every tick, never cached or stored back into state
    - Reads timers only; never mutates them
    - One clock reading per derivation so every row agrees on "now"
"""

from collections.abc import Iterable
from dataclasses import dataclass

from countdown_todo.core.domain_types import CountdownPrecision, UrgencyTier
from countdown_todo.core.record_protocols import TimerLike
from countdown_todo.core.time_format import (
    compact_remaining_text, remaining_minutes, remaining_text, to_minute,
)
from countdown_todo.core.urgency import classify_urgency, elapsed_fraction


@dataclass(frozen=True)
class TimerView:
    timer_id: str
    name: str
    remaining_minutes: int
    tier: UrgencyTier
    countdown_text: str
    compact_text: str
    progress: float
    selected: bool

    @property
    def overdue(self) -> bool:
        return self.remaining_minutes < 0


def derive_timer_view(
    timer: TimerLike,
    now_ms: int,
    precision: CountdownPrecision = CountdownPrecision.MINUTE,
    selected: bool = False,
) -> TimerView:
    now = to_minute(now_ms)
    remaining = remaining_minutes(timer, now)
    return TimerView(
        timer_id=timer.id,
        name=timer.name,
        remaining_minutes=remaining,
        tier=classify_urgency(remaining),
        countdown_text=remaining_text(timer, now),
        compact_text=compact_remaining_text(timer, precision, now_ms),
        progress=elapsed_fraction(timer, now),
        selected=selected,
    )


def derive_timer_views(
    timers: Iterable[TimerLike],
    selected_timer_id: str | None,
    precision: CountdownPrecision,
    now_ms: int,
) -> list[TimerView]:
    return [
        derive_timer_view(t, now_ms, precision, t.id == selected_timer_id)
        for t in timers
    ]
